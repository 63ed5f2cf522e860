"""Helper modules for the LabelPrintWeb application."""

__all__ = [
    "auth",
    "catalog",
    "datafile",
    "i18n",
    "label_renderer",
    "patients",
]
