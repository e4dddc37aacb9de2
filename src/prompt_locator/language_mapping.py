"""
Maps file paths to the language names used in language_config.py.
"""
import os

EXTENSION_TO_LANGUAGE = {
    # Python
    ".py": "python",
    ".pyw": "python",
    ".pyi": "python",

    # JavaScript family
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",

    # Others
    ".rb": "ruby",
    ".php": "php",
    ".java": "java",
    ".go": "go",
    ".cs": "c#",
}

# Known filenames without standard extensions
KNOWN_FILENAMES = {
    "gemfile": "ruby",
    "rakefile": "ruby",
    "vagrantfile": "ruby",
    "brewfile": "ruby",
}


def get_language_from_extension(file_path: str) -> str | None:
    """
    Determines the language name from the file path (checking filename first, then extension).

    Args:
        file_path: The path to the file.

    Returns:
        The corresponding language name string if found, otherwise None.
    """
    if not file_path:
        return None

    filename = os.path.basename(file_path).lower()
    if filename in KNOWN_FILENAMES:
        return KNOWN_FILENAMES[filename]

    _, extension = os.path.splitext(filename)
    return EXTENSION_TO_LANGUAGE.get(extension)
