"""a11y-lens: WCAG 2.2 AA accessibility checks for web source files."""

__version__ = "0.1.0"
