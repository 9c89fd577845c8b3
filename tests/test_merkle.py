import pytest

from flareidx.merkle import (
    EmptyTreeError,
    HashNotFoundError,
    InvalidIndexError,
    Tree,
    build,
    build_from_hex,
    hex_to_hash,
    keccak256,
    new_from_hex,
    sorted_hash_pair,
    verify_proof,
)

VALS = ["0x01", "0x02", "0x03", "0x04", "0x05"]


def test_empty_tree():
    tree = Tree(())
    with pytest.raises(EmptyTreeError):
        tree.root()
    assert len(tree.nodes) == 0
    assert tree.hash_count() == 0
    assert tree.sorted_hashes() == []
    with pytest.raises(InvalidIndexError):
        tree.get_hash(0)
    with pytest.raises(InvalidIndexError):
        tree.get_proof(0)
    with pytest.raises(HashNotFoundError):
        tree.get_proof_from_hash(hex_to_hash("0x01"))


def test_single_leaf_tree():
    val = hex_to_hash("0x01")
    tree = Tree((val,))
    root = tree.root()
    assert root == val
    assert tree.nodes == (val,)
    assert tree.hash_count() == 1
    assert tree.sorted_hashes() == [val]
    assert tree.get_hash(0) == val
    proof = tree.get_proof(0)
    assert proof == []
    assert verify_proof(val, proof, root)
    proof = tree.get_proof_from_hash(val)
    assert proof == []
    assert verify_proof(val, proof, root)


def test_multi_leaf_tree():
    tree = build_from_hex(VALS, True)
    root = tree.root()
    assert len(tree.nodes) == 9
    assert tree.hash_count() == 5
    sorted_hashes = tree.sorted_hashes()
    assert len(sorted_hashes) == 5
    assert sorted_hashes == sorted(sorted_hashes)
    assert root == sorted_hash_pair(tree.nodes[1], tree.nodes[2])
    for i, leaf in enumerate(sorted_hashes):
        assert tree.get_hash(i) == leaf
        proof = tree.get_proof(i)
        assert verify_proof(leaf, proof, root)
        from_hash = tree.get_proof_from_hash(leaf)
        assert from_hash == proof
        assert verify_proof(leaf, from_hash, root)


def test_initial_hash_hashes_leaves():
    tree = build_from_hex(VALS, True)
    expected = sorted(keccak256(hex_to_hash(v)) for v in VALS)
    assert tree.sorted_hashes() == expected


def test_wrong_leaf_fails_verification():
    tree = build_from_hex(VALS, True)
    proof = tree.get_proof(0)
    assert not verify_proof(hex_to_hash("0x09"), proof, tree.root())


def test_invalid_index_bounds():
    tree = build_from_hex(VALS, False)
    with pytest.raises(InvalidIndexError):
        tree.get_hash(5)
    with pytest.raises(InvalidIndexError):
        tree.get_proof(-1)


def test_hash_not_found_in_built_tree():
    tree = build_from_hex(VALS, False)
    with pytest.raises(HashNotFoundError):
        tree.get_proof_from_hash(hex_to_hash("0x06"))


def test_build_from_hex_dedupes_consecutive():
    tree = build_from_hex(["0x01", "0x01", "0x02"], False)
    assert tree.hash_count() == 2


def test_build_without_leaves_is_empty():
    tree = build([], False)
    with pytest.raises(EmptyTreeError):
        tree.root()


def test_hex_to_hash_pads_left():
    assert hex_to_hash("0x01") == bytes(31) + b"\x01"
    assert hex_to_hash("0x1") == hex_to_hash("0x01")


def test_hex_to_hash_invalid():
    with pytest.raises(ValueError):
        hex_to_hash("0xzz")


def test_keccak_empty_input():
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_sorted_hash_pair_is_symmetric():
    a, b = hex_to_hash("0x01"), hex_to_hash("0x02")
    assert sorted_hash_pair(a, b) == sorted_hash_pair(b, a)
    assert sorted_hash_pair(a, b) == keccak256(a, b)


def test_new_from_hex_keeps_order():
    tree = new_from_hex(["0x02", "0x01"])
    assert tree.nodes == (hex_to_hash("0x02"), hex_to_hash("0x01"))