"""Closed vocabularies shared by the naming pipeline and configuration."""

from __future__ import annotations

from typing import Literal, get_args

NamingConvention = Literal[
    "kebab-case",
    "snake_case",
    "camelCase",
    "PascalCase",
    "lowercase",
    "UPPERCASE",
]

# Concrete categories are the only values the template engine accepts.
Category = Literal["document", "movie", "music", "series", "photo", "book", "general"]

# "auto" asks the classifier to pick a concrete category.
CategoryChoice = Literal[Category, "auto"]

DateFormat = Literal["YYYY-MM-DD", "YYYY", "YYYYMMDD", "none"]

ProviderName = Literal["claude", "openai", "ollama", "lmstudio"]

NAMING_CONVENTIONS: tuple[str, ...] = get_args(NamingConvention)
CATEGORIES: tuple[str, ...] = get_args(Category)
CATEGORY_CHOICES: tuple[str, ...] = (*CATEGORIES, "auto")
DATE_FORMATS: tuple[str, ...] = get_args(DateFormat)
PROVIDERS: tuple[str, ...] = get_args(ProviderName)

__all__ = [
    "CATEGORIES",
    "CATEGORY_CHOICES",
    "Category",
    "CategoryChoice",
    "DATE_FORMATS",
    "DateFormat",
    "NAMING_CONVENTIONS",
    "NamingConvention",
    "PROVIDERS",
    "ProviderName",
]
