"""
Module 04 - Merkle Tree Unit Tests
Tests for hashtree/merkle/merkle_tree.py

Required behaviour:
1. Leaf count - equals block count, plus one padding duplicate when odd
2. Round trip - build_from_leaves(build(blocks).leaves()) has the same root
3. Idempotence - root_hash()/leaves() are stable
4. Single block - root equals the leaf digest
5. verify - true for original blocks, false for tampered ones
6. Out-of-range index - IndexOutOfRangeException
"""
import pytest

from hashtree.config.runtime import RuntimeConfig, TreeConfig, set_default_config
from hashtree.crypto.hashing import double_sha256, hash_leaf, hash_node, sha256
from hashtree.merkle.merkle_tree import MerkleTree, assemble
from hashtree.schemas.errors import (
    EmptyInputException,
    ErrorCodes,
    IndexOutOfRangeException,
)

from fixtures import CountingHasher, make_blocks, make_tree


class TestBuild:
    """Tests for MerkleTree.build()."""

    def test_three_blocks_example(self, abc_tree):
        """[a, b, c] -> 4 leaves, 7 nodes."""
        la, lb, lc = (hash_leaf(x) for x in (b"a", b"b", b"c"))
        ab = hash_node(la, lb)
        cc = hash_node(lc, lc)

        assert abc_tree.leaf_count == 4
        assert len(abc_tree.nodes) == 7
        assert abc_tree.leaves() == (la, lb, lc, lc)
        assert abc_tree.root_hash() == hash_node(ab, cc)
        assert abc_tree.nodes == (hash_node(ab, cc), ab, cc, la, lb, lc, lc)

    def test_root_reproducible(self, abc_blocks):
        roots = {make_tree(abc_blocks).root_hash() for _ in range(5)}

        assert len(roots) == 1

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 8, 9, 16, 17])
    def test_leaf_count(self, count):
        tree = MerkleTree.build(make_blocks(count), hasher=sha256)

        assert len(tree.leaves()) == (count if count % 2 == 0 or count == 1 else count + 1)

    def test_leaves_are_tagged_block_hashes(self):
        blocks = make_blocks(5)
        tree = MerkleTree.build(blocks, hasher=sha256)
        expected = [hash_leaf(b.encode("utf-8")) for b in blocks]

        assert list(tree.leaves()) == expected + [expected[-1]]

    def test_single_block(self):
        tree = MerkleTree.build(["only"], hasher=sha256)

        assert tree.root_hash() == hash_leaf(b"only")
        assert tree.leaves() == (hash_leaf(b"only"),)
        assert tree.leaf_count == 1
        assert len(tree.nodes) == 1

    def test_empty_blocks_raises(self):
        with pytest.raises(EmptyInputException) as exc_info:
            MerkleTree.build([])

        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT

    def test_accepts_generator(self):
        tree = MerkleTree.build((b for b in ["a", "b", "c"]), hasher=sha256)

        assert tree.root_hash() == make_tree(["a", "b", "c"]).root_hash()

    def test_block_count_recorded(self, abc_tree):
        assert abc_tree.block_count == 3

    def test_different_blocks_different_roots(self):
        assert make_tree(["a", "b"]).root_hash() != make_tree(["x", "y"]).root_hash()

    def test_block_order_matters(self):
        assert make_tree(["a", "b", "c"]).root_hash() != make_tree(["c", "b", "a"]).root_hash()

    def test_custom_encoder(self):
        tree = MerkleTree.build([1, 2], hasher=sha256, encoder=lambda n: n.to_bytes(4, "big"))

        assert tree.leaves()[0] == hash_leaf(b"\x00\x00\x00\x01")

    def test_hasher_failure_propagates(self):
        def broken(data: bytes) -> bytes:
            raise RuntimeError("oracle down")

        with pytest.raises(RuntimeError, match="oracle down"):
            MerkleTree.build(["a"], hasher=broken)

    def test_encoder_failure_propagates(self):
        def broken(block):
            raise TypeError("cannot encode")

        with pytest.raises(TypeError, match="cannot encode"):
            MerkleTree.build(["a"], hasher=sha256, encoder=broken)

    def test_default_hasher_from_config(self):
        set_default_config(RuntimeConfig(tree=TreeConfig(hash_algorithm="double_sha256")))

        tree = MerkleTree.build(["a"])

        assert tree.root_hash() == hash_leaf(b"a", double_sha256)
        assert tree.hash_algorithm == "double_sha256"

    def test_hash_calls_bounded_by_node_count(self):
        hasher = CountingHasher()

        tree = MerkleTree.build(make_blocks(9), hasher=hasher)

        # padding copies are never hashed
        assert hasher.calls == 9 + 5 + 3 + 2 + 1
        assert hasher.calls < len(tree.nodes)


class TestBuildFromLeaves:
    """Tests for MerkleTree.build_from_leaves()."""

    @pytest.mark.parametrize("count", [1, 2, 3, 6, 7, 9, 33])
    def test_round_trip_root(self, count):
        tree = MerkleTree.build(make_blocks(count), hasher=sha256)

        rebuilt = MerkleTree.build_from_leaves(tree.leaves(), hasher=sha256)

        assert rebuilt.root_hash() == tree.root_hash()
        assert rebuilt.nodes == tree.nodes
        assert rebuilt == tree

    def test_unpadded_leaves_padded_the_same_way(self):
        tree = MerkleTree.build(["a", "b", "c"], hasher=sha256)
        real_leaves = tree.leaves()[:3]

        rebuilt = MerkleTree.build_from_leaves(real_leaves, hasher=sha256)

        assert rebuilt.root_hash() == tree.root_hash()
        assert rebuilt.leaf_count == 4

    def test_empty_leaves_raises(self):
        with pytest.raises(EmptyInputException):
            MerkleTree.build_from_leaves([], hasher=sha256)

    def test_single_leaf_is_root(self):
        leaf = hash_leaf(b"x")

        tree = MerkleTree.build_from_leaves([leaf], hasher=sha256)

        assert tree.root_hash() == leaf

    def test_tampered_leaf_changes_root(self, abc_tree):
        leaves = list(abc_tree.leaves())
        leaves[1] = hash_leaf(b"evil")

        rebuilt = MerkleTree.build_from_leaves(leaves, hasher=sha256)

        assert rebuilt.root_hash() != abc_tree.root_hash()

    def test_hasher_mismatch_changes_root(self, abc_tree):
        rebuilt = MerkleTree.build_from_leaves(abc_tree.leaves(), hasher=double_sha256)

        assert rebuilt.root_hash() != abc_tree.root_hash()

    def test_block_count_optional(self, abc_tree):
        assert MerkleTree.build_from_leaves(abc_tree.leaves()).block_count is None
        assert MerkleTree.build_from_leaves(abc_tree.leaves(), block_count=3).block_count == 3


class TestReadAccess:
    """Tests for root_hash(), leaves(), node(), children()."""

    def test_idempotent(self, abc_tree):
        assert abc_tree.root_hash() == abc_tree.root_hash()
        assert abc_tree.leaves() == abc_tree.leaves()

    def test_node_is_one_based(self, abc_tree):
        assert abc_tree.node(1) == abc_tree.root_hash()
        assert abc_tree.node(7) == abc_tree.leaves()[-1]

    @pytest.mark.parametrize("index", [0, 8, -1])
    def test_node_out_of_range(self, abc_tree, index):
        with pytest.raises(IndexOutOfRangeException):
            abc_tree.node(index)

    def test_children_follow_heap_when_levels_full(self, abc_tree):
        assert abc_tree.children(1) == (2, 3)
        assert abc_tree.children(3) == (6, 7)
        assert abc_tree.children(4) is None

    @pytest.mark.parametrize("count", [3, 5, 9, 13, 21])
    def test_children_hash_to_parent(self, count):
        tree = MerkleTree.build(make_blocks(count), hasher=sha256)

        for index in range(1, len(tree.nodes) - tree.leaf_count + 1):
            children = tree.children(index)
            if children is None:
                continue
            left, right = children
            assert tree.node(index) == hash_node(tree.node(left), tree.node(right))

    def test_padding_duplicate_has_no_children(self):
        """With 5 blocks, level 1 is [ab, cd, ee, ee]; the copy at index 7 has none."""
        tree = MerkleTree.build(make_blocks(5), hasher=sha256)

        assert tree.node(7) == tree.node(6)
        assert tree.children(6) == (12, 13)
        assert tree.children(7) is None

    def test_single_node_has_no_children(self):
        assert MerkleTree.build(["a"], hasher=sha256).children(1) is None

    def test_depth_and_digest_size(self, abc_tree):
        assert abc_tree.depth == 3
        assert abc_tree.digest_size == 32

    def test_immutable(self, abc_tree):
        with pytest.raises(AttributeError):
            abc_tree.leaf_count = 2

    def test_inconsistent_node_array_rejected(self, abc_tree):
        with pytest.raises(ValueError, match="does not match"):
            MerkleTree(nodes=abc_tree.nodes[:-1], leaf_count=4)

    def test_inconsistent_block_count_rejected(self, abc_tree):
        with pytest.raises(ValueError, match="block_count"):
            MerkleTree(nodes=abc_tree.nodes, leaf_count=4, block_count=2)


class TestVerify:
    """Tests for MerkleTree.verify()."""

    def test_original_blocks_verify(self, many_blocks):
        tree = MerkleTree.build(many_blocks, hasher=sha256)

        for i, block in enumerate(many_blocks):
            assert tree.verify(i, block) is True

    def test_padding_index_accepts_last_block(self, abc_tree):
        assert abc_tree.verify(3, "c") is True

    def test_tampered_block_fails(self, abc_tree):
        assert abc_tree.verify(0, "A") is False
        assert abc_tree.verify(1, "b ") is False

    def test_block_at_wrong_index_fails(self, abc_tree):
        assert abc_tree.verify(0, "b") is False

    def test_index_equal_to_leaf_count_raises(self, abc_tree):
        with pytest.raises(IndexOutOfRangeException) as exc_info:
            abc_tree.verify(abc_tree.leaf_count, "a")

        assert exc_info.value.code == ErrorCodes.INDEX_OUT_OF_RANGE
        assert exc_info.value.details == {"index": 4, "leaf_count": 4}

    def test_negative_index_raises(self, abc_tree):
        with pytest.raises(IndexError):
            abc_tree.verify(-1, "c")

    def test_verify_uses_tree_encoder(self):
        encoder = lambda n: n.to_bytes(2, "big")  # noqa: E731
        tree = MerkleTree.build([7, 8], hasher=sha256, encoder=encoder)

        assert tree.verify(1, 8) is True
        assert tree.verify(1, 7) is False


class TestAssemble:
    """Tests for the module-level assemble()."""

    def test_assemble_matches_build_from_leaves(self):
        leaves = [hash_leaf(b) for b in (b"1", b"2", b"3")]

        assert assemble(leaves).root_hash() == MerkleTree.build_from_leaves(leaves, hasher=sha256).root_hash()

    def test_assemble_empty_raises(self):
        with pytest.raises(EmptyInputException):
            assemble([])


@pytest.mark.slow
def test_build_hundred_blocks_repeatedly():
    blocks = ["Hello World"] * 100

    roots = {MerkleTree.build(blocks, hasher=sha256).root_hash() for _ in range(100)}

    assert len(roots) == 1
