"""Input of ballot files.

This subpackage is structured into modules by file format:

-   :mod:`blt` for ranked ballots in the BLT format popularized by OpenSTV,
-   :mod:`approval` for approval ballots in a comma-separated matrix, as
    exported e.g. by SurveyMonkey.

Every loader registers the candidates in a fresh
:class:`ballotcount.candidate.ElectionContext` and returns a
:class:`core.ElectionData` container.
"""
