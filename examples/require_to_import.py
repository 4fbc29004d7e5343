"""
Require to Import
=================

Turns top-level ``const name = require("module")`` declarations into
``import name from "module"``. Destructuring, multi-declarator and nested
``require`` calls are left alone.

    codemorph -t examples/require_to_import.py --dry -p src/
"""

from codemorph.runner import API, FileInfo

parser = "esprima-module"


def transform(file: FileInfo, api: API, options: dict) -> str | None:
    j = api.codemorph
    root = j(file.source)
    requires = root.find_variable_declarators().filter(
        j.filters.VariableDeclarator.requires_module()
    )

    converted = 0
    for path in requires.paths():
        declaration = path.parent
        arguments = path.value["init"]["arguments"]
        if (
            len(declaration.value["declarations"]) != 1
            or not j.Program.check(declaration.parent.value)
            or not j.Identifier.check(path.value["id"])
            or not arguments
            or not j.Literal.check(arguments[0])
        ):
            continue
        declaration.replace(
            j.template.statement(
                "import ${name} from ${source};",
                name=path.value["id"],
                source=arguments[0]["raw"],
            )
        )
        converted += 1

    if not converted:
        return None
    api.stats("converted", converted)
    return root.to_source()
