from foundry_mcp import commands


def test_cast_call_omits_unset_options():
    argv = commands.cast_call("cast", "0xabc", "balanceOf(address)(uint256)")
    assert argv == ["cast", "call", "0xabc", "balanceOf(address)(uint256)"]


def test_cast_call_with_everything():
    argv = commands.cast_call(
        "cast",
        "0xabc",
        "balanceOf(address)(uint256)",
        args=["0xdef"],
        rpc_url="http://localhost:8545",
        block="latest",
        from_address="0x111",
    )
    assert argv == [
        "cast", "call", "0xabc", "balanceOf(address)(uint256)", "0xdef",
        "--rpc-url", "http://localhost:8545", "--block", "latest", "--from", "0x111",
    ]


def test_signature_with_spaces_stays_one_argument():
    argv = commands.cast_abi_encode("cast", "f(uint256 a, string b)", ["1", "hello world"])
    assert argv == ["cast", "abi-encode", "f(uint256 a, string b)", "1", "hello world"]


def test_empty_strings_never_produce_flags():
    argv = commands.cast_send("cast", "0xabc", "pause()", from_address="", value="", gas_limit="", private_key="")
    assert argv == ["cast", "send", "0xabc", "pause()"]


def test_cast_send_signs_when_key_given():
    argv = commands.cast_send("cast", "0xabc", "transfer(address,uint256)", args=["0xdef", "5"], private_key="0xkey")
    assert argv[-2:] == ["--private-key", "0xkey"]


def test_cast_balance_ether_flag_is_presence_triggered():
    assert "--ether" not in commands.cast_balance("cast", "0xabc", ether=False)
    assert commands.cast_balance("cast", "0xabc", rpc_url="http://x", ether=True) == [
        "cast", "balance", "0xabc", "--rpc-url", "http://x", "--ether",
    ]


def test_zero_nonce_is_still_emitted():
    argv = commands.cast_send_tx("cast", "0xabc", nonce=0)
    assert argv == ["cast", "mktx", "0xabc", "--nonce", "0"]


def test_cast_send_tx_broadcast_uses_send():
    argv = commands.cast_send_tx("cast", "0xabc", data="0x1234", value="10", broadcast=True)
    assert argv == ["cast", "send", "0xabc", "0x1234", "--value", "10"]


def test_cast_run_flags_and_labels():
    argv = commands.cast_run(
        "cast", "0xhash", rpc_url="http://x", quick=True, verbosity="vvvv", labels=["0x1:Router", "0x2:Pool"]
    )
    assert argv == [
        "cast", "run", "0xhash", "--rpc-url", "http://x", "--quick", "-vvvv",
        "--label", "0x1:Router", "--label", "0x2:Pool",
    ]


def test_field_is_positional_for_tx_and_receipt():
    assert commands.cast_tx("cast", "0xh", field="input") == ["cast", "tx", "0xh", "input"]
    assert commands.cast_receipt("cast", "0xh", field="status") == ["cast", "receipt", "0xh", "status"]
    assert commands.cast_block("cast", "latest", field="number") == ["cast", "block", "latest", "--field", "number"]


def test_compute_slot_uses_cast_index():
    assert commands.cast_compute_slot("cast", "0", "0xabc") == ["cast", "index", "address", "0xabc", "0"]


def test_calldata_without_signature_uses_selector_lookup():
    assert commands.cast_calldata("cast", "0xa9059cbb") == ["cast", "4byte-decode", "0xa9059cbb"]
    assert commands.cast_calldata("cast", "0xa9", "transfer(address,uint256)") == [
        "cast", "calldata-decode", "transfer(address,uint256)", "0xa9",
    ]


def test_to_unit_appends_source_unit():
    assert commands.cast_to_unit("cast", "1.5", "ether", "gwei") == ["cast", "to-unit", "1.5ether", "gwei"]
    assert commands.cast_to_unit("cast", "1000", "wei", "ether") == ["cast", "to-unit", "1000", "ether"]


def test_anvil_start_only_given_flags():
    assert commands.anvil_start("anvil") == ["anvil"]
    assert commands.anvil_start("anvil", port=9545, chain_id=31337, fork_url="https://rpc") == [
        "anvil", "--port", "9545", "--fork-url", "https://rpc", "--chain-id", "31337",
    ]


def test_forge_script_broadcast():
    argv = commands.forge_script(
        "forge", "script/Deploy.s.sol", rpc_url="http://x", broadcast=True, verbosity="vvv", private_key="0xkey"
    )
    assert argv == [
        "forge", "script", "script/Deploy.s.sol", "--rpc-url", "http://x",
        "--broadcast", "-vvv", "--private-key", "0xkey",
    ]


def test_forge_script_sig_args():
    argv = commands.forge_script("forge", "script/Deploy.s.sol", sig="run(uint256)", args=["42"])
    assert argv == ["forge", "script", "script/Deploy.s.sol", "--sig", "run(uint256)", "42"]


def test_forge_test_filters():
    assert commands.forge_test("forge") == ["forge", "test"]
    assert commands.forge_test("forge", match_test="testMint", verbosity="vv") == [
        "forge", "test", "--match-test", "testMint", "-vv",
    ]


def test_forge_script_args_without_sig_are_kept():
    argv = commands.forge_script("forge", "script/Deploy.s.sol", args=["42", "0xabc"])
    assert argv == ["forge", "script", "script/Deploy.s.sol", "42", "0xabc"]
