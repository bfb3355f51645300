"""BrainCache - personal knowledge bookmarking service"""
__version__ = "1.0.0"
