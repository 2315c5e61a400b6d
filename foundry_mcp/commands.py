"""
commands.py
Argument-vector builders for anvil, cast and forge.

Every builder returns a fresh argv list; no shell is involved, so signatures,
URLs and user values are passed as single arguments and never need quoting.
Optional values that are None or empty never produce their flag.
"""
from typing import Any, List, Optional, Sequence


def _opt(argv: List[str], flag: str, value: Any) -> None:
    if value is None or value == "":
        return
    argv.extend([flag, str(value)])


def _flag(argv: List[str], flag: str, enabled: Optional[bool]) -> None:
    if enabled:
        argv.append(flag)


def _args(argv: List[str], values: Optional[Sequence[str]]) -> None:
    if values:
        argv.extend(str(v) for v in values)


def _verbosity(argv: List[str], level: Optional[str]) -> None:
    if level:
        argv.append("-" + level)


def _signer(argv: List[str], private_key: Optional[str]) -> None:
    _opt(argv, "--private-key", private_key)


# anvil

def anvil_start(
    anvil: str,
    port: Optional[int] = None,
    host: Optional[str] = None,
    block_time: Optional[int] = None,
    fork_url: Optional[str] = None,
    fork_block_number: Optional[int] = None,
    chain_id: Optional[int] = None,
    accounts: Optional[int] = None,
    balance: Optional[int] = None,
) -> List[str]:
    argv = [anvil]
    _opt(argv, "--port", port)
    _opt(argv, "--host", host)
    _opt(argv, "--block-time", block_time)
    _opt(argv, "--fork-url", fork_url)
    _opt(argv, "--fork-block-number", fork_block_number)
    _opt(argv, "--chain-id", chain_id)
    _opt(argv, "--accounts", accounts)
    _opt(argv, "--balance", balance)
    return argv


# cast

def cast_call(
    cast: str,
    contract_address: str,
    function_signature: str,
    args: Optional[Sequence[str]] = None,
    rpc_url: Optional[str] = None,
    block: Optional[str] = None,
    from_address: Optional[str] = None,
) -> List[str]:
    argv = [cast, "call", contract_address, function_signature]
    _args(argv, args)
    _opt(argv, "--rpc-url", rpc_url)
    _opt(argv, "--block", block)
    _opt(argv, "--from", from_address)
    return argv


def cast_send(
    cast: str,
    contract_address: str,
    function_signature: str,
    args: Optional[Sequence[str]] = None,
    from_address: Optional[str] = None,
    value: Optional[str] = None,
    rpc_url: Optional[str] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    confirmations: Optional[int] = None,
    private_key: Optional[str] = None,
) -> List[str]:
    argv = [cast, "send", contract_address, function_signature]
    _args(argv, args)
    _opt(argv, "--from", from_address)
    _opt(argv, "--value", value)
    _opt(argv, "--rpc-url", rpc_url)
    _opt(argv, "--gas-limit", gas_limit)
    _opt(argv, "--gas-price", gas_price)
    _opt(argv, "--confirmations", confirmations)
    _signer(argv, private_key)
    return argv


def cast_balance(
    cast: str,
    address: str,
    rpc_url: Optional[str] = None,
    block: Optional[str] = None,
    ether: bool = False,
) -> List[str]:
    argv = [cast, "balance", address]
    _opt(argv, "--rpc-url", rpc_url)
    _opt(argv, "--block", block)
    _flag(argv, "--ether", ether)
    return argv


def cast_receipt(
    cast: str,
    tx_hash: str,
    rpc_url: Optional[str] = None,
    confirmations: Optional[int] = None,
    field: Optional[str] = None,
) -> List[str]:
    argv = [cast, "receipt", tx_hash]
    if field:
        argv.append(field)
    _opt(argv, "--rpc-url", rpc_url)
    _opt(argv, "--confirmations", confirmations)
    return argv


def cast_abi_encode(cast: str, signature: str, args: Optional[Sequence[str]] = None) -> List[str]:
    argv = [cast, "abi-encode", signature]
    _args(argv, args)
    return argv


def cast_abi_decode(cast: str, signature: str, data: str, decode_input: bool = False) -> List[str]:
    argv = [cast, "abi-decode", signature, data]
    _flag(argv, "--input", decode_input)
    return argv


def cast_4byte(cast: str, selector: str) -> List[str]:
    return [cast, "4byte", selector]


def cast_compute_slot(cast: str, slot: str, key: str, key_type: str = "address") -> List[str]:
    # cast index <key type> <key> <slot>
    return [cast, "index", key_type, key, slot]


def cast_storage(
    cast: str,
    address: str,
    slot: str,
    rpc_url: Optional[str] = None,
    block: Optional[str] = None,
) -> List[str]:
    argv = [cast, "storage", address, slot]
    _opt(argv, "--rpc-url", rpc_url)
    _opt(argv, "--block", block)
    return argv


def cast_tx(cast: str, tx_hash: str, rpc_url: Optional[str] = None, field: Optional[str] = None) -> List[str]:
    argv = [cast, "tx", tx_hash]
    if field:
        argv.append(field)
    _opt(argv, "--rpc-url", rpc_url)
    return argv


def cast_calldata(cast: str, calldata: str, signature: Optional[str] = None) -> List[str]:
    if signature:
        return [cast, "calldata-decode", signature, calldata]
    return [cast, "4byte-decode", calldata]


def cast_run(
    cast: str,
    tx_hash: str,
    rpc_url: Optional[str] = None,
    quick: bool = False,
    verbosity: Optional[str] = None,
    debug: bool = False,
    labels: Optional[Sequence[str]] = None,
) -> List[str]:
    argv = [cast, "run", tx_hash]
    _opt(argv, "--rpc-url", rpc_url)
    _flag(argv, "--quick", quick)
    _verbosity(argv, verbosity)
    _flag(argv, "--debug", debug)
    for label in labels or ():
        _opt(argv, "--label", label)
    return argv


def cast_send_tx(
    cast: str,
    to: str,
    data: Optional[str] = None,
    value: Optional[str] = None,
    from_address: Optional[str] = None,
    rpc_url: Optional[str] = None,
    nonce: Optional[int] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    broadcast: bool = False,
    private_key: Optional[str] = None,
) -> List[str]:
    argv = [cast, "send" if broadcast else "mktx", to]
    if data:
        argv.append(data)
    _opt(argv, "--value", value)
    _opt(argv, "--from", from_address)
    _opt(argv, "--rpc-url", rpc_url)
    _opt(argv, "--nonce", nonce)
    _opt(argv, "--gas-limit", gas_limit)
    _opt(argv, "--gas-price", gas_price)
    _signer(argv, private_key)
    return argv


def cast_block(cast: str, block: str, rpc_url: Optional[str] = None, field: Optional[str] = None) -> List[str]:
    argv = [cast, "block", block]
    _opt(argv, "--field", field)
    _opt(argv, "--rpc-url", rpc_url)
    return argv


def cast_chain_id(cast: str, rpc_url: Optional[str] = None) -> List[str]:
    argv = [cast, "chain-id"]
    _opt(argv, "--rpc-url", rpc_url)
    return argv


def cast_sig(cast: str, signature: str) -> List[str]:
    return [cast, "sig", signature]


def cast_to_unit(cast: str, value: str, from_unit: str, to_unit: str) -> List[str]:
    amount = value if from_unit == "wei" else f"{value}{from_unit}"
    return [cast, "to-unit", amount, to_unit]


# forge

def forge_version(forge: str) -> List[str]:
    return [forge, "--version"]


def forge_init(forge: str) -> List[str]:
    return [forge, "init", "--no-git", "--force"]


def forge_install(forge: str, dependency: str) -> List[str]:
    return [forge, "install", "--no-git", dependency]


def forge_build(forge: str, sizes: bool = False) -> List[str]:
    argv = [forge, "build"]
    _flag(argv, "--sizes", sizes)
    return argv


def forge_test(
    forge: str,
    match_test: Optional[str] = None,
    match_contract: Optional[str] = None,
    fork_url: Optional[str] = None,
    verbosity: Optional[str] = None,
) -> List[str]:
    argv = [forge, "test"]
    _opt(argv, "--match-test", match_test)
    _opt(argv, "--match-contract", match_contract)
    _opt(argv, "--fork-url", fork_url)
    _verbosity(argv, verbosity)
    return argv


def forge_script(
    forge: str,
    script_path: str,
    sig: Optional[str] = None,
    args: Optional[Sequence[str]] = None,
    rpc_url: Optional[str] = None,
    broadcast: bool = False,
    verbosity: Optional[str] = None,
    private_key: Optional[str] = None,
) -> List[str]:
    argv = [forge, "script", script_path]
    if sig:
        argv.extend(["--sig", sig])
    _args(argv, args)
    _opt(argv, "--rpc-url", rpc_url)
    _flag(argv, "--broadcast", broadcast)
    _verbosity(argv, verbosity)
    _signer(argv, private_key)
    return argv
