"""
Challenge sequence generation.

Random sources and the constrained sampler that extends the sequence by one
signal per level.
"""
