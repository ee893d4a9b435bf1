"""
Normalization engine: field resolution, shape detection, reshaping and assembly.
"""
