"""
Generation configuration

A single immutable record handed to every component, replacing the
global "exceptions" and "extensions" switches of the C++ generator.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Methods whose names are reserved words in C++
DEFAULT_RENAMES = MappingProxyType({
    'union': 'unite',
    'delete': 'del',
})


@dataclass(frozen=True)
class GenConfig:
    """Configuration for one generation run"""
    namespace: str = 'isl'
    prefix: str = 'isl_'
    exceptions: bool = True
    extensions: bool = True
    renames: Mapping[str, str] = field(default_factory=lambda: DEFAULT_RENAMES)
    ignores: frozenset[str] = frozenset()

    def qualify(self, name: str) -> str:
        """Qualify a target name with the library namespace"""
        return f'{self.namespace}::{name}'

    @property
    def bool_type(self) -> str:
        """C++ counterpart of the library boolean type"""
        return self.qualify('boolean') if not self.exceptions else 'bool'

    @property
    def stat_type(self) -> str:
        """C++ counterpart of the library status type"""
        return self.qualify('stat') if not self.exceptions else 'void'

    @property
    def ctx_type(self) -> str:
        return self.qualify('ctx')

    @property
    def c_bool(self) -> str:
        return f'{self.prefix}bool'

    @property
    def c_stat(self) -> str:
        return f'{self.prefix}stat'

    @property
    def c_ctx(self) -> str:
        return f'{self.prefix}ctx'

    @property
    def on_error_continue(self) -> str:
        return f'{self.prefix.upper()}ON_ERROR_CONTINUE'

    def rename(self, name: str) -> str:
        """Rename a method whose name would clash with a C++ keyword"""
        return self.renames.get(name, name)
