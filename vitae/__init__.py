"""
VITAE - Versatile Intake and Templated Assembly of Employment records

A résumé document generator that accepts loosely-structured form submissions,
normalizes them into a fixed template schema, and renders finished PDFs from
presentation templates.

Architecture:
- Intake Context: Submission shape detection, field resolution, photo acquisition
- Templating Context: Text fitting, schema normalization, template population
- Rendering Context: PDF conversion and generation orchestration
"""

__version__ = "0.1.0"
