"""
Main generator module

Orchestrates all components to generate complete C++ bindings.
"""

import os
import sys
from types import MappingProxyType
from typing import Optional

from .ir import IR
from .config import GenConfig, DEFAULT_RENAMES
from .codegen import CodeGen
from .types import TypeConverter
from .callback import CallbackGenerator
from .func import MethodGenerator
from .klass import ClassGenerator
from .enum import EnumGenerator


def _class_generator(ir: IR, config: GenConfig) -> ClassGenerator:
    type_conv = TypeConverter(ir, config)
    callback_gen = CallbackGenerator(ir, type_conv, config)
    method_gen = MethodGenerator(ir, type_conv, callback_gen, config)
    return ClassGenerator(ir, type_conv, method_gen, config)


def emit_forward_declarations(ir: IR, config: GenConfig) -> str:
    """Forward declarations of all classes, followed by the enums"""
    gen = CodeGen()
    class_gen = _class_generator(ir, config)
    gen.line('// forward declarations')
    for clazz in ir.classes.values():
        class_gen.generate_forward_decl(clazz, gen)

    if config.extensions and ir.enums:
        enum_gen = EnumGenerator(config)
        gen.line()
        gen.line('// enums')
        for i, enum in enumerate(ir.enums.values()):
            if i:
                gen.line()
            enum_gen.generate(enum, gen)
    return gen.output()


def emit_declarations(ir: IR, config: GenConfig) -> str:
    """Declarations of all classes

    Only reads "ir", so it can run independently of emit_implementations.
    """
    gen = CodeGen()
    class_gen = _class_generator(ir, config)
    for i, clazz in enumerate(ir.classes.values()):
        if i:
            gen.line()
        class_gen.generate_decl(clazz, gen)
    return gen.output()


def emit_implementations(ir: IR, config: GenConfig) -> str:
    """Implementations of all classes"""
    gen = CodeGen()
    class_gen = _class_generator(ir, config)
    for i, clazz in enumerate(ir.classes.values()):
        if i:
            gen.line()
        class_gen.generate_impl(clazz, gen)
    return gen.output()


def generate(ir: IR, config: GenConfig) -> str:
    """Generate the complete C++ interface

    Forward declarations come first, then the class declarations and at
    the end all implementations.  Bindings without exceptions are wrapped
    in an inline namespace to avoid conflicts with the default bindings.
    """
    ns = config.namespace
    parts = ['\n', f'namespace {ns} {{\n\n']
    if not config.exceptions:
        parts.append('inline namespace noexceptions {\n\n')

    parts.append(emit_forward_declarations(ir, config))
    parts.append('\n')
    parts.append(emit_declarations(ir, config))
    parts.append('\n')
    parts.append(emit_implementations(ir, config))

    if not config.exceptions:
        parts.append('} // namespace noexceptions\n')
    parts.append(f'}} // namespace {ns}\n')
    return ''.join(parts)


class Generator:
    """Main binding generator"""

    def __init__(self, exceptions: bool = True, extensions: bool = True,
                 namespace: Optional[str] = None, prefix: Optional[str] = None):
        self.exceptions = exceptions
        self.extensions = extensions
        self.namespace = namespace
        self.prefix = prefix
        self._renames: dict[str, str] = dict(DEFAULT_RENAMES)
        self._global_ignores: set[str] = set()

    def ignore(self, *names: str):
        """Add C functions to leave out of the bindings"""
        self._global_ignores.update(names)

    def rename(self, name: str, cpp_name: str):
        """Rename a method, typically one named after a C++ keyword"""
        self._renames[name] = cpp_name

    def config(self, ir: IR) -> GenConfig:
        """Freeze the configuration for a run over "ir"

        Namespace and prefix default to the ones recorded in the class table.
        """
        return GenConfig(
            namespace=self.namespace or ir.namespace,
            prefix=self.prefix or ir.prefix,
            exceptions=self.exceptions,
            extensions=self.extensions,
            renames=MappingProxyType(dict(self._renames)),
            ignores=frozenset(self._global_ignores),
        )

    def generate(self, ir: IR) -> str:
        return generate(ir, self.config(ir))

    def generate_file(self, input_path: str, output_path: Optional[str] = None):
        """Generate bindings for the class table in "input_path"

        The output file is only written once generation has succeeded.
        Without "output_path", the bindings go to stdout.
        """
        print('=== Generating C++ bindings:', file=sys.stderr)
        print(f'  {input_path} => {output_path or "<stdout>"}', file=sys.stderr)

        ir = IR.load(input_path)
        code = self.generate(ir)

        if output_path is None:
            sys.stdout.write(code)
            return
        out_dir = os.path.dirname(output_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        tmp_path = output_path + '.tmp'
        with open(tmp_path, 'w', newline='\n') as f:
            f.write(code)
        os.replace(tmp_path, output_path)
