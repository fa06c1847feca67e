"""Unit tests for the paragraph pool."""

from datetime import timedelta

from sectionist.services.paragraph_pool import (
    add_paragraph,
    delete_paragraph,
    get_paragraph,
    get_paragraphs_by_container,
    get_unassigned_paragraphs,
    last_order_in_container,
    update_paragraph_content,
)


class TestAddParagraph:
    """Test adding paragraphs to the pool."""

    def test_add_to_empty_pool(self, paragraph_ids, base_time):
        """Test the first paragraph is empty, unassigned and at order 0."""
        paragraphs, paragraph = add_paragraph([], paragraph_ids, base_time)

        assert paragraphs == [paragraph]
        assert paragraph.id == "paragraph-0001"
        assert paragraph.content == ""
        assert paragraph.container_id is None
        assert paragraph.order == 0
        assert paragraph.created_at == base_time
        assert paragraph.updated_at == base_time

    def test_order_is_pool_size(self, make_paragraph, paragraph_ids, base_time):
        """Test a new paragraph's order equals the current pool size."""
        existing = [make_paragraph("a"), make_paragraph("b", order=1)]

        paragraphs, paragraph = add_paragraph(existing, paragraph_ids, base_time)

        assert paragraph.order == 2
        assert len(paragraphs) == 3

    def test_input_list_not_mutated(self, make_paragraph, paragraph_ids, base_time):
        """Test that adding returns a new list."""
        existing = [make_paragraph("a")]

        add_paragraph(existing, paragraph_ids, base_time)

        assert len(existing) == 1


class TestUpdateParagraphContent:
    """Test updating paragraph content."""

    def test_update_changes_content_and_timestamp(self, make_paragraph, base_time):
        """Test content is replaced and updated_at refreshed."""
        original = make_paragraph("p1", content="old")
        later = base_time + timedelta(minutes=5)

        paragraphs, changed = update_paragraph_content([original], "p1", "new", later)

        assert changed is True
        assert paragraphs[0].id == "p1"
        assert paragraphs[0].content == "new"
        assert paragraphs[0].updated_at == later
        assert paragraphs[0].created_at == base_time
        assert original.content == "old"

    def test_identical_content_is_no_op(self, make_paragraph, base_time):
        """Test writing the same content changes nothing."""
        original = make_paragraph("p1", content="same")

        paragraphs, changed = update_paragraph_content([original], "p1", "same", base_time + timedelta(hours=1))

        assert changed is False
        assert paragraphs[0].updated_at == base_time

    def test_unknown_id_is_no_op(self, make_paragraph):
        """Test updating a missing paragraph changes nothing."""
        paragraphs, changed = update_paragraph_content([make_paragraph("p1")], "missing", "x")

        assert changed is False
        assert [p.id for p in paragraphs] == ["p1"]

    def test_other_paragraphs_untouched(self, make_paragraph, base_time):
        """Test only the targeted paragraph is replaced."""
        first = make_paragraph("p1", content="one")
        second = make_paragraph("p2", content="two", order=1)

        paragraphs, _ = update_paragraph_content([first, second], "p2", "TWO", base_time)

        assert paragraphs[0] is first
        assert paragraphs[1].content == "TWO"


class TestDeleteParagraph:
    """Test deleting paragraphs."""

    def test_delete_removes_paragraph(self, make_paragraph):
        """Test the paragraph is gone and siblings keep their orders."""
        paragraphs = [
            make_paragraph("p1", container_id="c1", order=0),
            make_paragraph("p2", container_id="c1", order=1),
            make_paragraph("p3", container_id="c1", order=2),
        ]

        remaining, removed = delete_paragraph(paragraphs, "p2")

        assert removed is True
        assert [(p.id, p.order) for p in remaining] == [("p1", 0), ("p3", 2)]

    def test_delete_unknown_id(self, make_paragraph):
        """Test deleting a missing paragraph reports nothing removed."""
        remaining, removed = delete_paragraph([make_paragraph("p1")], "missing")

        assert removed is False
        assert len(remaining) == 1

    def test_copies_survive_source_deletion(self, make_paragraph):
        """Test copies keep their original_id after the source is deleted."""
        source = make_paragraph("p1", content="Hello")
        copy = make_paragraph("p2", content="Hello", container_id="c1", original_id="p1")

        remaining, _ = delete_paragraph([source, copy], "p1")

        assert remaining == [copy]
        assert remaining[0].original_id == "p1"


class TestPoolQueries:
    """Test pool lookups."""

    def test_get_paragraph(self, make_paragraph):
        """Test lookup by id."""
        paragraphs = [make_paragraph("p1"), make_paragraph("p2")]

        assert get_paragraph(paragraphs, "p2").id == "p2"
        assert get_paragraph(paragraphs, "missing") is None
        assert get_paragraph(paragraphs, "") is None

    def test_unassigned_sorted_by_creation(self, make_paragraph):
        """Test the pool view lists unassigned paragraphs oldest first."""
        paragraphs = [
            make_paragraph("late", seconds=30),
            make_paragraph("assigned", container_id="c1", seconds=0),
            make_paragraph("early", seconds=10),
        ]

        assert [p.id for p in get_unassigned_paragraphs(paragraphs)] == ["early", "late"]

    def test_by_container_sorted_by_order(self, make_paragraph):
        """Test container view is sorted by order, not list position."""
        paragraphs = [
            make_paragraph("third", container_id="c1", order=7),
            make_paragraph("first", container_id="c1", order=0),
            make_paragraph("other", container_id="c2", order=1),
            make_paragraph("second", container_id="c1", order=3),
        ]

        assert [p.id for p in get_paragraphs_by_container(paragraphs, "c1")] == ["first", "second", "third"]
        assert get_paragraphs_by_container(paragraphs, "") == []

    def test_last_order_in_container(self, make_paragraph):
        """Test highest order lookup with gaps and empty containers."""
        paragraphs = [
            make_paragraph("a", container_id="c1", order=0),
            make_paragraph("b", container_id="c1", order=5),
        ]

        assert last_order_in_container(paragraphs, "c1") == 5
        assert last_order_in_container(paragraphs, "c2") == -1
