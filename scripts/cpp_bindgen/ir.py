"""
IR (Intermediate Representation) module

Reads and represents the class table handed over by the C-API
introspection front end. The table is built once and never mutated
by the emitters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import json

from .codegen import GenerationError, split_annotation, extract_ptr_type, is_func_ptr, normalize_ptr_type


class IRError(GenerationError):
    """Malformed class table"""


class Ownership(Enum):
    """Ownership annotation of a parameter"""
    TAKE = 'take'
    KEEP = 'keep'


@dataclass(frozen=True)
class ParamInfo:
    """Function parameter information"""
    name: str
    type: str
    ownership: Ownership = Ownership.TAKE

    @property
    def keeps(self) -> bool:
        return self.ownership is Ownership.KEEP

    @property
    def is_callback(self) -> bool:
        return is_func_ptr(self.type)


@dataclass(frozen=True)
class FuncInfo:
    """Function declaration information"""
    name: str
    type: str  # Full function type signature
    params: tuple[ParamInfo, ...]
    gives: bool = False

    @property
    def return_type(self) -> str:
        """Extract return type from full type signature"""
        return self.type[:self.type.index('(')].strip()

    @property
    def has_callback(self) -> bool:
        return any(p.is_callback for p in self.params)

    def wrapped_params(self) -> list[tuple[int, ParamInfo]]:
        """Parameters that are passed to the C function by the wrapper

        The user pointer following each callback is supplied by the
        wrapper itself and is therefore left out.
        """
        result = []
        skip_next = False
        for i, param in enumerate(self.params):
            if skip_next:
                skip_next = False
                continue
            result.append((i, param))
            skip_next = param.is_callback
        return result


@dataclass(frozen=True)
class EnumItem:
    """Enum item (constant)"""
    name: str


@dataclass(frozen=True)
class EnumInfo:
    """Enum type information"""
    name: str
    items: tuple[EnumItem, ...]


@dataclass(frozen=True)
class ClassInfo:
    """Wrapper class description

    "name" is the C type of the underlying object.  For a subclass that is
    selected by a type function, "subclass_name" differs from "name" and
    the class shares the C object of its superclass.
    """
    name: str
    subclass_name: str
    superclasses: tuple[str, ...] = ()
    type_fn: Optional[FuncInfo] = None
    is_equal_fn: Optional[FuncInfo] = None
    to_str_fn: Optional[FuncInfo] = None
    constructors: tuple[FuncInfo, ...] = ()
    methods: tuple[tuple[str, tuple[FuncInfo, ...]], ...] = ()

    @property
    def is_type_subclass(self) -> bool:
        return self.name != self.subclass_name


@dataclass(frozen=True)
class IR:
    """Intermediate representation of the library interface"""
    prefix: str
    namespace: str
    classes: dict[str, ClassInfo]
    enums: dict[str, EnumInfo] = field(default_factory=dict)

    @classmethod
    def load(cls, json_path: str) -> 'IR':
        """Load IR from a JSON file"""
        with open(json_path, 'r') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'IR':
        """Create IR from a dictionary"""
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> 'IR':
        """Internal: Parse dict into IR"""
        if not isinstance(data, dict):
            raise IRError('class table must be a JSON object')
        prefix = data.get('prefix', 'isl_')
        namespace = data.get('namespace', prefix.rstrip('_'))

        classes = {}
        for decl in data.get('classes', []):
            clazz = cls._parse_class(decl, prefix)
            if clazz.subclass_name in classes:
                raise IRError(f'duplicate class {clazz.subclass_name}')
            classes[clazz.subclass_name] = clazz

        enums = {}
        for decl in data.get('enums', []):
            enum = cls._parse_enum(decl)
            enums[enum.name] = enum

        return cls(
            prefix=prefix,
            namespace=namespace,
            classes=dict(sorted(classes.items())),
            enums=dict(sorted(enums.items())),
        )

    @classmethod
    def _parse_class(cls, decl: dict, prefix: str) -> ClassInfo:
        """Parse class declaration"""
        name = _require(decl, 'name', 'class')
        where = f'class {name}'

        def optional_func(key):
            if decl.get(key) is None:
                return None
            return cls._parse_func(decl[key], prefix)

        constructors = [cls._parse_func(c, prefix) for c in decl.get('constructors', [])]
        methods = []
        for method_name, overloads in sorted(decl.get('methods', {}).items()):
            if not overloads:
                raise IRError(f'{where}: method group {method_name} is empty')
            funcs = [cls._parse_func(m, prefix) for m in overloads]
            methods.append((method_name, tuple(sorted(funcs, key=lambda f: f.name))))

        return ClassInfo(
            name=name,
            subclass_name=decl.get('subclass_name') or name,
            superclasses=tuple(decl.get('superclasses', [])),
            type_fn=optional_func('type_fn'),
            is_equal_fn=optional_func('is_equal_fn'),
            to_str_fn=optional_func('to_str_fn'),
            constructors=tuple(sorted(constructors, key=lambda f: f.name)),
            methods=tuple(methods),
        )

    @staticmethod
    def _parse_func(decl: dict, prefix: str) -> FuncInfo:
        """Parse function declaration"""
        name = _require(decl, 'name', 'function')
        func_type = _require(decl, 'type', f'function {name}')
        if '(' not in func_type:
            raise IRError(f'function {name}: malformed type {func_type!r}')

        params = []
        for p in decl.get('params', []):
            pname = _require(p, 'name', f'parameter of {name}')
            kind, ptype = split_annotation(_require(p, 'type', f'parameter {pname} of {name}'), prefix)
            tag = p.get('ownership', kind or 'take')
            try:
                ownership = Ownership(tag)
            except ValueError:
                raise IRError(f'function {name}: unknown ownership {tag!r} for {pname}') from None
            params.append(ParamInfo(name=pname, type=ptype, ownership=ownership))

        # each callback is followed by its user pointer
        for param, user in zip(params, params[1:] + [None]):
            if param.is_callback and (user is None or normalize_ptr_type(user.type) != 'void*'):
                raise IRError(f'function {name}: callback {param.name} is not followed by a void * user pointer')

        return_kind, func_type = split_annotation(func_type, prefix)
        return FuncInfo(
            name=name,
            type=func_type,
            params=tuple(params),
            gives=decl.get('gives', return_kind == 'give'),
        )

    @staticmethod
    def _parse_enum(decl: dict) -> EnumInfo:
        """Parse enum declaration"""
        items = [EnumItem(_require(item, 'name', 'enum item')) for item in decl.get('items', [])]
        return EnumInfo(
            name=_require(decl, 'name', 'enum'),
            items=tuple(items),
        )

    def get_class(self, c_name: str) -> Optional[ClassInfo]:
        """Get the class owning C type "c_name" (never a subclass view)"""
        clazz = self.classes.get(c_name)
        if clazz is not None and not clazz.is_type_subclass:
            return clazz
        return None

    def is_enum_type(self, type_name: str) -> bool:
        """Check if type is a known enum"""
        clean = type_name[len('enum '):] if type_name.startswith('enum ') else type_name
        return clean in self.enums

    def superclasses_of(self, c_name: str) -> tuple[str, ...]:
        clazz = self.get_class(c_name)
        return clazz.superclasses if clazz else ()

    def is_subclass(self, type_str: str, clazz: ClassInfo) -> bool:
        """Check if pointer type "type_str" is a (transitive) subclass of "clazz"

        Only the superclass lists declared on the C types are consulted.
        """
        parents = list(self.superclasses_of(extract_ptr_type(type_str)))
        seen = set()
        while parents:
            candidate = parents.pop()
            if candidate == clazz.subclass_name:
                return True
            if candidate in seen:
                continue
            seen.add(candidate)
            parents.extend(self.superclasses_of(candidate))
        return False


def _require(decl: dict, key: str, what: str):
    if key not in decl:
        raise IRError(f'{what}: missing "{key}"')
    return decl[key]
