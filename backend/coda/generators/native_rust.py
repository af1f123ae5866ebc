from coda.generators.base import CodeGenerator, ProjectTemplate
from coda.generators.prompts import NATIVE_RUST_SYSTEM_PROMPT
from coda.schemas.generation import GeneratedFile

DEFAULT_LIB_RS = """\
use solana_program::{
    account_info::AccountInfo,
    entrypoint,
    entrypoint::ProgramResult,
    pubkey::Pubkey,
};

pub mod error;
pub mod instruction;
pub mod processor;
pub mod state;

entrypoint!(process_instruction);

pub fn process_instruction(
    program_id: &Pubkey,
    accounts: &[AccountInfo],
    instruction_data: &[u8],
) -> ProgramResult {
    processor::process_instruction(program_id, accounts, instruction_data)
}
"""

DEFAULT_INSTRUCTION_RS = """\
use borsh::{BorshDeserialize, BorshSerialize};
use solana_program::program_error::ProgramError;

#[derive(BorshSerialize, BorshDeserialize, Debug)]
pub enum ProgramInstruction {
    Initialize,
}

impl ProgramInstruction {
    pub fn unpack(input: &[u8]) -> Result<Self, ProgramError> {
        let (&variant, _rest) = input.split_first().ok_or(ProgramError::InvalidInstructionData)?;

        Ok(match variant {
            0 => Self::Initialize,
            _ => return Err(ProgramError::InvalidInstructionData),
        })
    }
}
"""

DEFAULT_PROCESSOR_RS = """\
use solana_program::{
    account_info::AccountInfo,
    entrypoint::ProgramResult,
    msg,
    pubkey::Pubkey,
};

use crate::instruction::ProgramInstruction;

pub fn process_instruction(
    program_id: &Pubkey,
    accounts: &[AccountInfo],
    instruction_data: &[u8],
) -> ProgramResult {
    let instruction = ProgramInstruction::unpack(instruction_data)?;

    match instruction {
        ProgramInstruction::Initialize => {
            msg!("Instruction: Initialize");
            process_initialize(program_id, accounts)
        }
    }
}

fn process_initialize(_program_id: &Pubkey, _accounts: &[AccountInfo]) -> ProgramResult {
    msg!("Processing initialize instruction");
    Ok(())
}
"""

DEFAULT_STATE_RS = """\
use borsh::{BorshDeserialize, BorshSerialize};

#[derive(BorshSerialize, BorshDeserialize, Debug)]
pub struct ProgramState {
    pub is_initialized: bool,
}

impl ProgramState {
    pub const LEN: usize = 1;
}
"""

DEFAULT_ERROR_RS = """\
use solana_program::program_error::ProgramError;
use thiserror::Error;

#[derive(Error, Debug, Copy, Clone)]
pub enum ProgramErrorCode {
    #[error("Account not initialized")]
    NotInitialized,

    #[error("Account already initialized")]
    AlreadyInitialized,
}

impl From<ProgramErrorCode> for ProgramError {
    fn from(e: ProgramErrorCode) -> Self {
        ProgramError::Custom(e as u32)
    }
}
"""

DEFAULT_CARGO_TOML = """\
[package]
name = "native-solana-program"
version = "0.1.0"
edition = "2021"

[dependencies]
solana-program = "1.17"
borsh = "0.10.3"
thiserror = "1.0"

[lib]
crate-type = ["cdylib", "lib"]

[profile.release]
overflow-checks = true
lto = "fat"
codegen-units = 1

[profile.release.build-override]
opt-level = 3
incremental = false
codegen-units = 1
"""


def native_skeleton(reply: str) -> list[GeneratedFile]:
    # Native replies are rarely a single file, so nothing is borrowed from the reply.
    return [
        GeneratedFile(path="src/lib.rs", content=DEFAULT_LIB_RS, language="rust"),
        GeneratedFile(path="src/instruction.rs", content=DEFAULT_INSTRUCTION_RS, language="rust"),
        GeneratedFile(path="src/processor.rs", content=DEFAULT_PROCESSOR_RS, language="rust"),
        GeneratedFile(path="src/state.rs", content=DEFAULT_STATE_RS, language="rust"),
        GeneratedFile(path="src/error.rs", content=DEFAULT_ERROR_RS, language="rust"),
        GeneratedFile(path="Cargo.toml", content=DEFAULT_CARGO_TOML, language="toml"),
    ]


NATIVE_RUST_TEMPLATE = ProjectTemplate(
    project_type="native-rust",
    system_prompt=NATIVE_RUST_SYSTEM_PROMPT,
    primary_language="rust",
    languages=frozenset({"rust", "toml", "markdown"}),
    instruction_labels=("Instructions", "How to use", "Build"),
    default_instructions="Build and deploy the native Solana program.",
    next_steps=(
        "Install Rust and Solana CLI",
        "Build the program: cargo build-bpf",
        "Deploy to devnet: solana program deploy target/deploy/program.so",
        "Test the program with your client",
    ),
    skeleton=native_skeleton,
)


class NativeRustGenerator(CodeGenerator):
    def __init__(self) -> None:
        super().__init__(NATIVE_RUST_TEMPLATE)
