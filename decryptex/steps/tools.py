"""The concrete deobfuscation and beautification tools, in pipeline order."""

from decryptex.core.cleanup import StepContext
from decryptex.steps.base import (
    InPlaceStep,
    OutputDirStep,
    SiblingFileStep,
    Step,
    TempSiblingStep,
)


class JsBeautifyStep(InPlaceStep):
    name = "js-beautify"
    description = "Reformat the file in place with js-beautify"

    def command(self, context: StepContext) -> list[str]:
        return ["js-beautify", "-f", str(context.file_path), "-j", "-x", "--good-stuff", "-a", "-r"]


class WakaruStep(OutputDirStep):
    """`@wakaru/cli` subcommands writing into the shared output directory."""

    def __init__(self, subcommand: str):
        self.subcommand = subcommand
        self.name = f"@wakaru/cli {subcommand}"
        self.description = f"Run wakaru {subcommand} into the output directory"

    def command(self, context: StepContext) -> list[str]:
        return [
            "npx", "@wakaru/cli", self.subcommand, str(context.file_path),
            "--output", str(context.output_dir), "--force",
        ]


class JsDeobfuscatorStep(InPlaceStep):
    name = "js-deobfuscator"
    description = "Rewrite the file with js-deobfuscator"

    def command(self, context: StepContext) -> list[str]:
        return ["js-deobfuscator", "-i", str(context.file_path), "-o", str(context.file_path)]


class RestringerStep(InPlaceStep):
    name = "restringer"
    description = "Rewrite the file with restringer"

    def command(self, context: StepContext) -> list[str]:
        return ["restringer", str(context.file_path), "-o", str(context.file_path)]


class WebcrackStep(TempSiblingStep):
    name = "webcrack"
    description = "Run webcrack into the .temp sibling"

    def command(self, context: StepContext) -> list[str]:
        return ["npx", "webcrack", str(context.file_path), "-o", str(context.temp_path), "-f"]


class SynchronyStep(SiblingFileStep):
    name = "synchrony deobfuscate"
    description = "Run synchrony into the .deobfuscated.js sibling"

    def command(self, context: StepContext) -> list[str]:
        return ["synchrony", "deobfuscate", str(context.file_path), "-o", str(context.deobfuscated_path)]


def default_steps() -> list[Step]:
    """Return the fixed, ordered pipeline steps."""
    return [
        JsBeautifyStep(),
        WakaruStep("unpacker"),
        WakaruStep("unminify"),
        JsDeobfuscatorStep(),
        RestringerStep(),
        WebcrackStep(),
        SynchronyStep(),
        JsBeautifyStep(),
    ]
