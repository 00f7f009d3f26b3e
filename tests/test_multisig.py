import hashlib

import pytest

from bridge_admin.errors import BcsError, ConfigurationError, InsufficientWeightError
from bridge_admin.multisig import (
    MultisigSigner,
    Participant,
    SignatureSet,
    combine_signatures,
    compose_multisig,
    decode_multisig_signature,
)
from bridge_admin.signers import MultisigSignerConfig, SimpleSignerConfig, resolve_signer
from bridge_admin.utils.bytes import from_b64

TX = b"\x00\x00 unsigned transaction bytes"


def _parts(*kps, weights=None):
    weights = weights or [1] * len(kps)
    return [Participant(kp.public_key, w) for kp, w in zip(kps, weights)]


def test_address_matches_documented_derivation(alice, bob):
    pk = compose_multisig(_parts(alice, bob, weights=[1, 2]), 2)
    preimage = (
        b"\x03"
        + (2).to_bytes(2, "little")
        + b"\x00" + alice.public_key.raw + b"\x01"
        + b"\x00" + bob.public_key.raw + b"\x02"
    )
    assert pk.address == "0x" + hashlib.blake2b(preimage, digest_size=32).hexdigest()


def test_composition_is_deterministic(alice, bob):
    first = compose_multisig(_parts(alice, bob), 2)
    second = compose_multisig(_parts(alice, bob), 2)
    assert first.address == second.address
    assert first.to_bytes() == second.to_bytes()


def test_participant_order_changes_address(alice, bob):
    assert compose_multisig(_parts(alice, bob), 2).address != compose_multisig(_parts(bob, alice), 2).address


def test_threshold_and_weights_change_address(alice, bob):
    base = compose_multisig(_parts(alice, bob), 2).address
    assert compose_multisig(_parts(alice, bob), 1).address != base
    assert compose_multisig(_parts(alice, bob, weights=[2, 1]), 2).address != base


@pytest.mark.parametrize(
    "weights,threshold",
    [([1, 1], 3), ([0, 1], 1), ([256, 1], 1), ([1, 1], 0), ([1, 1], 70000)],
)
def test_invalid_policies(alice, bob, weights, threshold):
    with pytest.raises(ConfigurationError):
        compose_multisig(_parts(alice, bob, weights=weights), threshold)


def test_empty_and_duplicate_participants(alice):
    with pytest.raises(ConfigurationError):
        compose_multisig([], 1)
    with pytest.raises(ConfigurationError):
        compose_multisig(_parts(alice, alice), 1)


def test_single_participant_below_threshold_fails_locally(alice, bob):
    pk = compose_multisig(_parts(alice, bob), 2)
    with pytest.raises(InsufficientWeightError) as info:
        MultisigSigner(pk, [alice])
    assert info.value.weight == 1 and info.value.threshold == 2


def test_non_participant_key_is_rejected(alice, bob, carol):
    pk = compose_multisig(_parts(alice, bob), 1)
    with pytest.raises(ConfigurationError):
        MultisigSigner(pk, [carol])


def test_two_of_two_signature_layout(alice, bob):
    pk = compose_multisig(_parts(alice, bob), 2)
    signature = MultisigSigner(pk, [bob, alice]).sign_transaction(TX)

    raw = from_b64(signature)
    assert raw[0] == 0x03
    decoded_pk, by_index = decode_multisig_signature(signature)
    assert decoded_pk == pk
    assert sorted(by_index) == [0, 1]
    assert alice.public_key.verify_transaction(TX, by_index[0])
    assert bob.public_key.verify_transaction(TX, by_index[1])


@pytest.mark.parametrize("value", ["not base64!", "", "AAAA"])
def test_decode_rejects_malformed_multisig_signature(value):
    with pytest.raises(BcsError):
        decode_multisig_signature(value)


def test_weighted_signer_can_sign_alone(alice, bob):
    pk = compose_multisig(_parts(alice, bob, weights=[2, 1]), 2)
    signature = MultisigSigner(pk, [alice]).sign_transaction(TX)
    _, by_index = decode_multisig_signature(signature)
    assert list(by_index) == [0]


def test_offline_collection_matches_direct_signing(alice, bob):
    pk = compose_multisig(_parts(alice, bob), 2)
    partials = [bob.sign_transaction(TX), alice.sign_transaction(TX)]
    assert combine_signatures(pk, TX, partials) == MultisigSigner(pk, [alice, bob]).sign_transaction(TX)


def test_signature_set_rejects_foreign_bytes_and_short_weight(alice, bob):
    pk = compose_multisig(_parts(alice, bob), 2)
    sigs = SignatureSet(pk, TX)
    with pytest.raises(ConfigurationError):
        sigs.add_serialized(alice.sign_transaction(TX + b"other"))
    assert sigs.add_serialized(alice.sign_transaction(TX)) == 1
    assert not sigs.is_ready
    with pytest.raises(InsufficientWeightError):
        sigs.combine()


def test_signer_configs_resolve(alice, bob):
    assert resolve_signer(SimpleSignerConfig(alice)).address == alice.address

    config = MultisigSignerConfig.from_users([(alice, 1), (bob, 1)], 2)
    signer = resolve_signer(config)
    assert signer.address == config.address == config.multisig_pk.address

    with pytest.raises(ConfigurationError):
        resolve_signer("not a signer config")  # type: ignore[arg-type]
