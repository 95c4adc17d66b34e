'''Building blocks of the evaluators: quota functions and vote transfers.'''
