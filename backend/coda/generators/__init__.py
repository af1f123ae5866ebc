from coda.errors import ValidationError
from coda.generators.anchor import AnchorGenerator
from coda.generators.base import CodeGenerator, ProjectTemplate
from coda.generators.native_rust import NativeRustGenerator
from coda.generators.typescript_sdk import TypeScriptSDKGenerator

_GENERATORS: dict[str, type[CodeGenerator]] = {
    "anchor": AnchorGenerator,
    "native-rust": NativeRustGenerator,
    "typescript-sdk": TypeScriptSDKGenerator,
}


def get_generator(project_type: str) -> CodeGenerator:
    try:
        return _GENERATORS[project_type]()
    except KeyError:
        raise ValidationError(f"Invalid project type: {project_type}") from None


__all__ = [
    "AnchorGenerator",
    "CodeGenerator",
    "NativeRustGenerator",
    "ProjectTemplate",
    "TypeScriptSDKGenerator",
    "get_generator",
]
