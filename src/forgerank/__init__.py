"\"\"\"Evidence-based candidate ranking.\"\"\""

__version__ = "0.1.0"
