import setuptools

with open('README.md') as infile:
    long_description = infile.read()

with open('VERSION') as infile:
    version = infile.read().strip()

setuptools.setup(
    name='ballotcount',
    version=version,
    description='Multi-winner election tallying by approval methods and STV',
    long_description=long_description,
    long_description_content_type='text/markdown; charset=UTF-8',
    python_requires='>=3.8.0',
    packages=setuptools.find_packages(exclude=('tests', 'tests.*')),
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['ballotcount=ballotcount.__main__:run'],
    },
    include_package_data=True,
    license='MIT',
    keywords='voting election vote approval stv proportional python',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    zip_safe=True
)
