"""
isl binding configuration

Configures the binding generator with isl-specific customizations:
- methods named after C++ keywords
- functions the C++ interface does not expose
"""

from cpp_bindgen import Generator


# ==============================================================================
# Configuration
# ==============================================================================

# C functions that are part of the extracted interface but need
# hand-written C++ counterparts
IGNORED_FUNCTIONS = (
    'isl_ctx_alloc',
    'isl_ctx_free',
    'isl_options_set_on_error',
)


def configure(gen: Generator):
    """Configure generator with isl-specific settings"""

    gen.ignore(*IGNORED_FUNCTIONS)

    # Keywords that show up as isl method names
    gen.rename('union', 'unite')
    gen.rename('delete', 'del')
