"""Renders a Python module that registers types with explicit properties."""

from __future__ import annotations

import argparse
import inspect
import typing
from datetime import datetime
from types import UnionType
from typing import Any, Iterable, NamedTuple

from jinja2 import Environment, PackageLoader

from . import logs, reflect
from .catalog import TypeRegistry
from .utils.path import import_module

log = logs.get(__name__)


class PropertySource(NamedTuple):
    name: str
    type_name: str
    annotation: str
    writable: bool
    attr: str | None


class TypeSource(NamedTuple):
    path: str
    name: str
    properties: list[PropertySource]


def generate(types: Iterable[type], imports: Iterable[str] | None = None) -> str:
    """Return the source of a module defining `REGISTRY` for `types`."""
    importable = []
    for cls in types:
        if '<locals>' in cls.__qualname__:
            log.warning('skipping %s: not importable by path', cls.__qualname__)
            continue
        importable.append(cls)

    modules: set[str] = set()
    specs = []
    for descriptor in TypeRegistry(importable).descriptors():
        modules.add(descriptor.cls.__module__)
        props = []
        for prop in descriptor.properties.values():
            props.append(
                PropertySource(
                    prop.name,
                    prop.type_name,
                    annotation_source(prop.annotation, modules),
                    prop.writable,
                    prop.attr,
                )
            )
        specs.append(TypeSource(class_source(descriptor.cls), descriptor.name, props))

    env = Environment(loader=PackageLoader('jsonshape'), keep_trailing_newline=True)
    template = env.get_template('registry.py.j2')
    return template.render(
        timestamp=datetime.now().astimezone(),
        modules=sorted(modules - {'builtins', 'typing'}),
        imports=imports or [],
        specs=specs,
    )


def class_source(cls: type) -> str:
    if cls.__module__ == 'builtins':
        return cls.__qualname__
    return f'{cls.__module__}.{cls.__qualname__}'


def annotation_source(annotation: Any, modules: set[str]) -> str:
    """Return an expression that evaluates to `annotation`.

    Modules the expression refers to are added to `modules`. Annotations
    that cannot be written as an expression become their name as a string.
    """
    if isinstance(annotation, str):
        return repr(annotation)
    if annotation is None or annotation is type(None):
        return 'None'
    if annotation is Any:
        return 'typing.Any'
    if annotation is Ellipsis:
        return '...'

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Union or origin is UnionType:
        members = ', '.join(annotation_source(a, modules) for a in args)
        return f'typing.Union[{members}]'

    if origin is not None and args:
        base = annotation_source(origin, modules)
        return f'{base}[{", ".join(annotation_source(a, modules) for a in args)}]'

    if inspect.isclass(annotation) and '<locals>' not in annotation.__qualname__:
        modules.add(annotation.__module__)
        return class_source(annotation)

    log.warning('cannot express %r, keeping its name', annotation)
    return repr(reflect.type_name(annotation))


def main() -> None:
    parser = argparse.ArgumentParser('jsonshape-generate')
    parser.add_argument(
        '-m',
        '--module',
        action='append',
        dest='modules',
        metavar='MODULE',
        default=[],
        required=True,
        help='a module containing types to register',
    )
    parser.add_argument(
        '-i',
        '--import-string',
        action='append',
        dest='imports',
        metavar='IMPORT-STRING',
        default=[],
        help='an import string to add to the generated source',
    )
    parser.add_argument(
        '-o',
        '--output-path',
        help='a file to output to. outputs to STDOUT by default',
    )

    args = parser.parse_args()

    logs.init()

    found: list[type] = []
    for module_name in args.modules:
        mod = import_module(module_name)
        for attr in vars(mod).values():
            if reflect.is_candidate(attr) and attr not in found:
                found.append(attr)

    source = generate(found, args.imports)
    if args.output_path:
        with open(args.output_path, 'w') as f:
            f.write(source)
    else:
        print(source)


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        pass
