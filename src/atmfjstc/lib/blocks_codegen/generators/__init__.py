"""
Handlers for the standard block types. Importing this package registers all of them in the default registry.
"""

from atmfjstc.lib.blocks_codegen.generators import app, logic, loops, math, mynewt, text, variables  # noqa: F401
