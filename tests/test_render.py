from famtree.render import label, labels, node_options, render_html, render_text


class TestLabels:
    def test_label(self, family):
        assert label(family.lookup(2)) == "2(Mom)"

    def test_labels_follow_given_order(self, family):
        assert labels(family, family.depth_first_order(1)) == "1(Grandma) → 2(Mom) → 3(Me) → 4(Aunt) → 5(Cousin)"

    def test_labels_skip_missing(self, family):
        assert labels(family, [3, 99, 5]) == "3(Me) → 5(Cousin)"
        assert labels(family, []) == ""

    def test_node_options(self, family):
        options = node_options(family)
        assert options[0] == (0, "0 — ROOT")
        assert (5, "5 — Cousin") in options
        assert len(options) == len(family)


class TestRenderText:
    def test_outline(self, family):
        assert render_text(family) == "\n".join([
            "0 — ROOT",
            "  1 — Grandma",
            "    2 — Mom",
            "      3 — Me",
            "    4 — Aunt",
            "      5 — Cousin",
        ])

    def test_subtree_with_custom_indent(self, family):
        assert render_text(family, 4, indent="-") == "4 — Aunt\n-5 — Cousin"

    def test_unknown_start_renders_nothing(self, family):
        assert render_text(family, 99) == ""


class TestRenderHtml:
    def test_nested_lists(self, family):
        assert render_html(family) == (
            "<ul><li><strong>0</strong> — ROOT</li>"
            "<ul><li><strong>1</strong> — Grandma</li>"
            "<ul><li><strong>2</strong> — Mom</li>"
            "<ul><li><strong>3</strong> — Me</li></ul>"
            "<li><strong>4</strong> — Aunt</li>"
            "<ul><li><strong>5</strong> — Cousin</li></ul>"
            "</ul></ul></ul>"
        )

    def test_escapes_names_and_ids(self, tree):
        tree.insert("<b>", "Tom & <Jerry>")
        html = render_html(tree, "<b>")
        assert html == "<ul><li><strong>&lt;b&gt;</strong> — Tom &amp; &lt;Jerry&gt;</li></ul>"

    def test_deep_tree(self, tree):
        for i in range(1, 3001):
            tree.insert(i, "Gen %d" % i, i - 1)
        html = render_html(tree)
        assert html.count("<ul>") == html.count("</ul>") == 3001
        assert len(render_text(tree).splitlines()) == 3001
