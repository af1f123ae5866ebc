import json

from coda.generators.base import CodeGenerator, ProjectTemplate
from coda.generators.parsing import first_fenced_block
from coda.generators.prompts import TYPESCRIPT_SDK_SYSTEM_PROMPT
from coda.schemas.generation import GeneratedFile

DEFAULT_INDEX_TS = """\
export * from './client';
export * from './types';
"""

DEFAULT_CLIENT_TS = """\
import { Connection, PublicKey } from '@solana/web3.js';

export class ProgramClient {
  private connection: Connection;
  private programId: PublicKey;

  constructor(connection: Connection, programId: PublicKey) {
    this.connection = connection;
    this.programId = programId;
  }

  async initialize(): Promise<string> {
    // Implement your program interaction logic here
    throw new Error('Not implemented');
  }
}
"""

DEFAULT_TYPES_TS = """\
import { PublicKey } from '@solana/web3.js';

export interface ProgramAccount {
  publicKey: PublicKey;
  account: unknown;
}

export interface InitializeParams {
  // Add your parameters here
}
"""

PACKAGE_JSON = {
    "name": "solana-sdk",
    "version": "0.1.0",
    "description": "TypeScript SDK for Solana program",
    "main": "dist/index.js",
    "types": "dist/index.d.ts",
    "scripts": {"build": "tsc", "test": "jest"},
    "dependencies": {"@solana/web3.js": "^1.87.6", "@coral-xyz/anchor": "^0.29.0"},
    "devDependencies": {"typescript": "^5.3.3", "@types/node": "^20.10.6"},
}

TSCONFIG_JSON = {
    "compilerOptions": {
        "target": "ES2020",
        "module": "commonjs",
        "lib": ["ES2020"],
        "declaration": True,
        "outDir": "./dist",
        "rootDir": "./src",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
    },
    "include": ["src/**/*"],
    "exclude": ["node_modules", "dist"],
}


def sdk_skeleton(reply: str) -> list[GeneratedFile]:
    return [
        GeneratedFile(
            path="src/index.ts",
            content=first_fenced_block(reply, ("typescript", "ts")) or DEFAULT_INDEX_TS,
            language="typescript",
        ),
        GeneratedFile(path="src/client.ts", content=DEFAULT_CLIENT_TS, language="typescript"),
        GeneratedFile(path="src/types.ts", content=DEFAULT_TYPES_TS, language="typescript"),
        GeneratedFile(path="package.json", content=json.dumps(PACKAGE_JSON, indent=2), language="json"),
        GeneratedFile(path="tsconfig.json", content=json.dumps(TSCONFIG_JSON, indent=2), language="json"),
    ]


TYPESCRIPT_SDK_TEMPLATE = ProjectTemplate(
    project_type="typescript-sdk",
    system_prompt=TYPESCRIPT_SDK_SYSTEM_PROMPT,
    primary_language="typescript",
    languages=frozenset({"typescript", "json", "markdown"}),
    instruction_labels=("Instructions", "How to use", "Usage"),
    default_instructions="Install dependencies and build the SDK.",
    next_steps=(
        "Install Node.js and npm if not already installed",
        "Install dependencies: npm install",
        "Build the SDK: npm run build",
        "Import and use in your project",
    ),
    skeleton=sdk_skeleton,
)


class TypeScriptSDKGenerator(CodeGenerator):
    def __init__(self) -> None:
        super().__init__(TYPESCRIPT_SDK_TEMPLATE)
