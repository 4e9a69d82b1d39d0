"""
PromptShelf - personal prompt manager API.
"""
__version__ = "1.0.0"
