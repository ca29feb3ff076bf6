"""
C-specific naming utilities and sanitization.
"""

from ...core.naming import NameSanitizer


# C keywords up to C23
C_RESERVED_WORDS = {
    "alignas",
    "alignof",
    "auto",
    "bool",
    "break",
    "case",
    "char",
    "const",
    "constexpr",
    "continue",
    "default",
    "do",
    "double",
    "else",
    "enum",
    "extern",
    "false",
    "float",
    "for",
    "goto",
    "if",
    "inline",
    "int",
    "long",
    "nullptr",
    "register",
    "restrict",
    "return",
    "short",
    "signed",
    "sizeof",
    "static",
    "static_assert",
    "struct",
    "switch",
    "thread_local",
    "true",
    "typedef",
    "typeof",
    "union",
    "unsigned",
    "void",
    "volatile",
    "while",
}

# Identifiers from the included headers
C_LIBRARY_NAMES = {
    "NULL",
    "size_t",
    "strcmp",
}


def create_c_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for C."""
    return NameSanitizer(C_RESERVED_WORDS, C_LIBRARY_NAMES)
