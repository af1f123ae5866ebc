from coda.generators.base import CodeGenerator, ProjectTemplate
from coda.generators.parsing import ALL_LANGUAGES, first_fenced_block
from coda.generators.prompts import ANCHOR_SYSTEM_PROMPT
from coda.schemas.generation import GeneratedFile

PROGRAM_ID = "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS"

DEFAULT_LIB_RS = f"""\
use anchor_lang::prelude::*;

declare_id!("{PROGRAM_ID}");

#[program]
pub mod my_program {{
    use super::*;

    pub fn initialize(ctx: Context<Initialize>) -> Result<()> {{
        msg!("Program initialized!");
        Ok(())
    }}
}}

#[derive(Accounts)]
pub struct Initialize {{}}
"""

DEFAULT_CARGO_TOML = """\
[package]
name = "my-program"
version = "0.1.0"
description = "Created with Coda"
edition = "2021"

[lib]
crate-type = ["cdylib", "lib"]
name = "my_program"

[features]
no-entrypoint = []
no-idl = []
no-log-ix-name = []
cpi = ["no-entrypoint"]
default = []

[dependencies]
anchor-lang = "0.29.0"
"""

DEFAULT_ANCHOR_TOML = f"""\
[features]
seeds = false
skip-lint = false

[programs.localnet]
my_program = "{PROGRAM_ID}"

[programs.devnet]
my_program = "{PROGRAM_ID}"

[registry]
url = "https://api.apr.dev"

[provider]
cluster = "Localnet"
wallet = "~/.config/solana/id.json"

[scripts]
test = "yarn run ts-mocha -p ./tsconfig.json -t 1000000 tests/**/*.ts"
"""


def anchor_skeleton(reply: str) -> list[GeneratedFile]:
    return [
        GeneratedFile(
            path="programs/my-program/src/lib.rs",
            content=first_fenced_block(reply, ("rust",)) or DEFAULT_LIB_RS,
            language="rust",
        ),
        GeneratedFile(
            path="programs/my-program/Cargo.toml",
            content=first_fenced_block(reply, ("toml",)) or DEFAULT_CARGO_TOML,
            language="toml",
        ),
        GeneratedFile(path="Anchor.toml", content=DEFAULT_ANCHOR_TOML, language="toml"),
    ]


ANCHOR_TEMPLATE = ProjectTemplate(
    project_type="anchor",
    system_prompt=ANCHOR_SYSTEM_PROMPT,
    primary_language="rust",
    languages=ALL_LANGUAGES,
    instruction_labels=("Instructions", "How to use", "Deployment"),
    default_instructions="Build and deploy the program using Anchor CLI.",
    next_steps=(
        "Install Rust and Solana CLI if not already installed",
        "Install Anchor CLI: cargo install --git https://github.com/coral-xyz/anchor avm --locked",
        "Initialize Solana wallet: solana-keygen new",
        "Set Solana cluster to devnet: solana config set --url devnet",
        "Build the program: anchor build",
        "Deploy the program: anchor deploy",
        "Run tests: anchor test",
    ),
    skeleton=anchor_skeleton,
)


class AnchorGenerator(CodeGenerator):
    def __init__(self) -> None:
        super().__init__(ANCHOR_TEMPLATE)
