"""fdup: find duplicate files by the codes embedded in their names."""

__version__ = "0.3.0"
