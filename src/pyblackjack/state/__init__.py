"""State layer.

Turns batches of contract reads into the immutable snapshot each session
holds as its single current state.
"""
