"""
Title Order - ClickUp integration backend that renders title order forms to PDF.

Reads title orders from a ClickUp list and typesets them with LaTeX.

Architecture:
- Intake Context: ClickUp OAuth, task retrieval, custom field lookup
- Templating Context: LaTeX escaping, field formatting, order form population
- Rendering Context: PDF compilation and artifact lifecycle
- API: HTTP surface proxying ClickUp and streaming generated PDFs
"""

__version__ = "0.1.0"
