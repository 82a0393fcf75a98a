"""
ArchCircuit: study tour circuit recommendations for architecture students.
"""
__version__ = "0.1.0"
