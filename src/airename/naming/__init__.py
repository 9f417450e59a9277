"""Filename generation helpers: conventions, templates and prompts."""

from .conventions import NAMING_INSTRUCTIONS, apply_naming_convention, naming_instructions
from .prompts import AI_SYSTEM_PROMPT, build_file_name_prompt
from .templates import (
    FILE_TEMPLATES,
    FileTemplate,
    TemplateOptions,
    apply_template,
    format_date,
    template_fields_for,
    template_instructions,
)
from .types import (
    CATEGORIES,
    CATEGORY_CHOICES,
    DATE_FORMATS,
    NAMING_CONVENTIONS,
    PROVIDERS,
    Category,
    CategoryChoice,
    DateFormat,
    NamingConvention,
    ProviderName,
)

__all__ = [
    "AI_SYSTEM_PROMPT",
    "CATEGORIES",
    "CATEGORY_CHOICES",
    "Category",
    "CategoryChoice",
    "DATE_FORMATS",
    "DateFormat",
    "FILE_TEMPLATES",
    "FileTemplate",
    "NAMING_CONVENTIONS",
    "NAMING_INSTRUCTIONS",
    "NamingConvention",
    "PROVIDERS",
    "ProviderName",
    "TemplateOptions",
    "apply_naming_convention",
    "apply_template",
    "build_file_name_prompt",
    "format_date",
    "naming_instructions",
    "template_fields_for",
    "template_instructions",
]
