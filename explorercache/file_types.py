"""Text-file recognition by extension.

Only files recognised here are proactively downloaded by the background
prefetcher. Everything else (images, archives, binaries) is left alone.
"""

from typing import AbstractSet, Optional


DEFAULT_TEXT_EXTENSIONS = frozenset({
    'txt', 'md', 'markdown', 'js', 'jsx', 'ts', 'tsx', 'html', 'htm', 'css',
    'scss', 'sass', 'less', 'json', 'xml', 'yaml', 'yml', 'ini', 'config',
    'conf', 'sh', 'bash', 'py', 'rb', 'php', 'java', 'c', 'cpp', 'h', 'hpp',
    'cs', 'go', 'rs', 'swift', 'kt', 'sql', 'graphql', 'vue', 'svelte',
})


def file_extension(filename: str) -> str:
    """Return the lower-cased text after the last dot.

    A name without a dot is its own extension, so ``"Makefile"`` yields
    ``"makefile"``.
    """
    return filename.rsplit('.', 1)[-1].lower()


def is_text_file(
    filename: Optional[str],
    extensions: AbstractSet[str] = DEFAULT_TEXT_EXTENSIONS,
) -> bool:
    """Check if a file is likely a text file based on its extension.

    Args:
        filename: Bare file name or POSIX path
        extensions: Allow-list of lower-case extensions without the dot

    Returns:
        True if the extension is in the allow-list
    """
    if not filename:
        return False
    name = filename.rsplit('/', 1)[-1]
    return file_extension(name) in extensions
