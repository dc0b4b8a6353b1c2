"""Code synthesizer: IR → standalone program for the selected backend."""

from __future__ import annotations

import logging
import os
import textwrap
from typing import Sequence

from basescript.compiler.backends import get_handler
from basescript.compiler.backends.base import ENTRYPOINT_CLOSE, ENTRYPOINT_OPEN
from basescript.compiler.parser import generate_ir, parse_script
from basescript.compiler.types import Command, CommandName, CompiledProgram, make_fingerprint

logger = logging.getLogger(__name__)

_INDENT = "    "


class ScriptCompiler:
    """Compiles an IR into the source text of a runnable Python program."""

    def compile(
        self,
        ir: Sequence[Command],
        output_path: str | None = None,
    ) -> CompiledProgram:
        """
        Fold the backend handler over the IR.

        The first ``framework`` command picks the backend and contributes the
        module-level prologue. Every other block lands in ``main()`` in IR
        order, followed by an acknowledgement line. Commands the handler
        returns nothing for are skipped and reported in
        ``CompiledProgram.warnings``.

        Identical IR always produces identical text. When *output_path* is
        given the program is also written there.
        """
        framework = next((c for c in ir if c.name == CommandName.FRAMEWORK.value), None)
        if framework is None:
            raise ValueError("IR has no framework command")
        handler = get_handler(framework.value)

        prologue: str | None = None
        body: list[str] = []
        warnings: list[str] = []
        step_count = 0

        for command in ir:
            if command.name == CommandName.FRAMEWORK.value and prologue is not None:
                warnings.append(f"duplicate framework command {command.value!r} ignored")
                continue

            block = handler.handle(command.name, command.value)
            if block is None:
                warnings.append(
                    f"{handler.backend.value} backend has no handler for "
                    f"command {command.name!r}; step skipped"
                )
                continue

            if command.name == CommandName.FRAMEWORK.value:
                prologue = block
            else:
                body.append(block)
            body.append(handler.acknowledge(command.name))
            step_count += 1

        for message in warnings:
            logger.warning(message)

        main_body = textwrap.indent("\n".join(body), _INDENT)
        source = f"{prologue}\n\n{ENTRYPOINT_OPEN}\n{main_body}\n\n\n{ENTRYPOINT_CLOSE}"

        if output_path is not None:
            directory = os.path.dirname(output_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(source)

        return CompiledProgram(
            backend=handler.backend,
            source=source,
            step_count=step_count,
            fingerprint=make_fingerprint(source),
            warnings=warnings,
        )


def compile_script(text: str, output_path: str | None = None) -> CompiledProgram:
    """Parse, validate and compile script text in one call."""
    ir = generate_ir(parse_script(text))
    logger.debug("IR: %s", [command.to_dict() for command in ir])
    return ScriptCompiler().compile(ir, output_path=output_path)
