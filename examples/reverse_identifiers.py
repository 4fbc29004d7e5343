"""
Reverse Identifiers
===================

Replaces every identifier with its name spelled backwards. Declarations and
uses are renamed alike, so the program keeps working.

    codemorph -t examples/reverse_identifiers.py src/
"""

from codemorph.runner import API, FileInfo


def transform(file: FileInfo, api: API, options: dict) -> str:
    j = api.codemorph
    root = j(file.source)
    identifiers = root.find(j.Identifier)
    identifiers.replace_with(lambda path: j.identifier(path.value["name"][::-1]))
    api.stats("reversed", identifiers.size())
    return root.to_source()
