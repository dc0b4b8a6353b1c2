"""Compiler pipeline public API: schema validation, IR generation, synthesis."""

from basescript.compiler.backends import BackendHandler, get_handler
from basescript.compiler.compiler import ScriptCompiler, compile_script
from basescript.compiler.parser import generate_ir, parse_script
from basescript.compiler.schema import validate_document
from basescript.compiler.types import (
    Backend,
    Command,
    CommandName,
    CompiledProgram,
    ConnectionMode,
    TeardownOperation,
    make_fingerprint,
)

__all__ = [
    "Backend",
    "BackendHandler",
    "Command",
    "CommandName",
    "CompiledProgram",
    "ConnectionMode",
    "ScriptCompiler",
    "TeardownOperation",
    "compile_script",
    "generate_ir",
    "get_handler",
    "make_fingerprint",
    "parse_script",
    "validate_document",
]
