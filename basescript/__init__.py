from basescript.baseline import AnalysisConfig, BaselineStatus, baseline_scan_pipeline, build_lookup_map
from basescript.compiler import (
    Backend,
    Command,
    CommandName,
    CompiledProgram,
    ScriptCompiler,
    compile_script,
    generate_ir,
    parse_script,
)
from basescript.durations import parse_timeout
from basescript.errors import AssertionFailure, BaseScriptError, RegistryError, SchemaViolation

__all__ = [
    # Compiler
    "Backend",
    "Command",
    "CommandName",
    "CompiledProgram",
    "ScriptCompiler",
    "compile_script",
    "generate_ir",
    "parse_script",
    "parse_timeout",
    # Baseline
    "AnalysisConfig",
    "BaselineStatus",
    "baseline_scan_pipeline",
    "build_lookup_map",
    # Errors
    "AssertionFailure",
    "BaseScriptError",
    "RegistryError",
    "SchemaViolation",
]
