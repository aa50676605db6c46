import unittest

from svreg.model import TreeLeaf, TreeNode
from svreg.query import collect_leaves, find_all_by_tag, find_first_by_tag, iter_preorder


def _sample_tree():
    return TreeNode("Root", [
        TreeNode("Item", [
            TreeLeaf("SymbolIdentifier", "a", 0, 1),
            TreeNode("Item", [TreeLeaf("SymbolIdentifier", "b", 2, 3)]),
        ]),
        TreeLeaf(";", ";", 3, 4),
        TreeNode("Other", [TreeLeaf("SymbolIdentifier", "c", 5, 6)]),
    ])


class TestIterPreorder(unittest.TestCase):

    def test_document_order(self):
        """Elements should be yielded parent first, then children left to right."""
        order = [
            e.tag if isinstance(e, TreeNode) else e.text
            for e in iter_preorder(_sample_tree())
        ]
        self.assertEqual(order, ["Root", "Item", "a", "Item", "b", ";", "Other", "c"])

    def test_leaf_yields_itself(self):
        leaf = TreeLeaf("SymbolIdentifier", "x", 0, 1)
        self.assertEqual(list(iter_preorder(leaf)), [leaf])

    def test_deep_tree_does_not_recurse(self):
        """Very deep trees should be walked without hitting the recursion limit."""
        node = TreeNode("Leafmost", [TreeLeaf("SymbolIdentifier", "x", 0, 1)])
        for _ in range(5000):
            node = TreeNode("Wrap", [node])
        leaves = collect_leaves(node)
        self.assertEqual([l.text for l in leaves], ["x"])


class TestFindByTag(unittest.TestCase):

    def test_find_all_includes_nested_matches(self):
        items = find_all_by_tag(_sample_tree(), "Item")
        self.assertEqual(len(items), 2)
        self.assertIs(items[1], items[0].children[1])

    def test_find_all_includes_start_node(self):
        tree = _sample_tree()
        self.assertEqual(find_all_by_tag(tree, "Root"), [tree])

    def test_find_all_ignores_leaf_tags(self):
        self.assertEqual(find_all_by_tag(_sample_tree(), "SymbolIdentifier"), [])

    def test_find_first(self):
        tree = _sample_tree()
        self.assertIs(find_first_by_tag(tree, "Item"), tree.children[0])
        self.assertIs(find_first_by_tag(tree, "Other"), tree.children[2])

    def test_find_first_missing(self):
        self.assertIsNone(find_first_by_tag(_sample_tree(), "Missing"))


class TestCollectLeaves(unittest.TestCase):

    def test_left_to_right(self):
        self.assertEqual([l.text for l in collect_leaves(_sample_tree())], ["a", "b", ";", "c"])

    def test_node_without_leaves(self):
        self.assertEqual(collect_leaves(TreeNode("Empty")), [])


if __name__ == '__main__':
    unittest.main()
