"""Tests for Attr and Reference field processors (biocyc.fields)."""

import pytest
from lxml import etree

from biocyc.cache import ObjectCache, set_cache
from biocyc.errors import ObjectInvalid
from biocyc.fields import Attr, Reference, Resolved, Unresolved
from biocyc.identity import Identity
from biocyc.quantity import Quantity
from biocyc.records import Entity, Record


def _xml(text: str):
    return etree.fromstring(text)


class Specimen(Record):
    label = Attr("@label")
    counts = Attr("n/text()", kind="integer", collection=True)
    first_count = Attr("n/text()", kind="integer")
    weight = Attr("weight/text()", kind="float_with_units")
    tags = Attr("@tags", default="", transform=lambda value: value.split())
    status = Attr("status/text()", default="unknown")
    flagged = Attr("@flagged", kind="boolean", default=False)


class SpecimenPart(Record):
    name = Attr("text()")


class SpecimenHolder(Record):
    part = Attr("part", kind=SpecimenPart)
    parts = Attr("part", kind="SpecimenPart", collection=True)
    whole = Attr(kind="Specimen")


class StrictSpecimen(Record):
    label = Attr("@label")
    name = Attr("name/text()", null=False)


class StrictSpecimenVariant(StrictSpecimen):
    note = Attr("note/text()")


class Linked(Entity):
    owner = Reference("owner/*")
    members = Reference("members/*", collection=True)


class StrictLinked(Entity):
    owner = Reference("owner/*", null=False)


# ---------------------------------------------------------------------------
# Attr
# ---------------------------------------------------------------------------
class TestAttr:
    def test_collection_in_document_order(self):
        record = Specimen.parse(_xml("<s><n>1</n><n>2</n><n>3</n></s>"))
        assert record.counts == [1, 2, 3]

    def test_single_takes_first_match(self):
        record = Specimen.parse(_xml("<s><n>7</n><n>8</n></s>"))
        assert record.first_count == 7

    def test_missing_single_is_none(self):
        record = Specimen.parse(_xml("<s/>"))
        assert record.label is None
        assert record.first_count is None
        assert record.weight is None

    def test_missing_collection_is_empty_list(self):
        record = Specimen.parse(_xml("<s/>"))
        assert record.counts == []

    def test_empty_collections_are_not_shared(self):
        a = Specimen.parse(_xml("<s/>"))
        b = Specimen.parse(_xml("<s/>"))
        a.counts.append(1)
        assert b.counts == []

    def test_declared_default(self):
        record = Specimen.parse(_xml("<s/>"))
        assert record.status == "unknown"
        assert record.flagged is False

    def test_value_overrides_default(self):
        record = Specimen.parse(_xml('<s flagged="true"><status>done</status></s>'))
        assert record.status == "done"
        assert record.flagged is True

    def test_transform_applies_to_value_and_default(self):
        assert Specimen.parse(_xml('<s tags="a b  c"/>')).tags == ["a", "b", "c"]
        assert Specimen.parse(_xml("<s/>")).tags == []

    def test_units(self):
        record = Specimen.parse(_xml('<s><weight units="Da">75.07</weight></s>'))
        assert record.weight == Quantity(75.07, "Da")

    def test_nested_record_by_class_and_by_name(self):
        record = SpecimenHolder.parse(_xml("<h><part>a</part><part>b</part></h>"))
        assert isinstance(record.part, SpecimenPart)
        assert record.part.name == "a"
        assert [part.name for part in record.parts] == ["a", "b"]

    def test_empty_selector_uses_node_itself(self):
        record = SpecimenHolder.parse(_xml('<h label="x"><n>4</n></h>'))
        assert isinstance(record.whole, Specimen)
        assert record.whole.label == "x"
        assert record.whole.counts == [4]

    def test_required_missing_raises(self):
        node = _xml('<s label="x"/>')
        with pytest.raises(ObjectInvalid) as excinfo:
            StrictSpecimen.parse(node)
        assert excinfo.value.name == "name"
        assert excinfo.value.model is StrictSpecimen
        assert excinfo.value.node is node

    def test_required_missing_names_the_parsed_subclass(self):
        with pytest.raises(ObjectInvalid) as excinfo:
            StrictSpecimenVariant.parse(_xml('<s label="x"/>'))
        assert excinfo.value.model is StrictSpecimenVariant
        assert str(excinfo.value) == "StrictSpecimenVariant.name is required"

    def test_required_present(self):
        assert StrictSpecimen.parse(_xml("<s><name>ok</name></s>")).name == "ok"

    def test_cast_failure_propagates(self):
        with pytest.raises(ValueError):
            Specimen.parse(_xml("<s><n>1</n><n>x</n></s>"))

    def test_unknown_kind(self):
        class Broken(Record, register=False):
            value = Attr("v", kind="NoSuchKind")

        with pytest.raises(LookupError):
            Broken.parse(_xml("<b><v/></b>"))

    def test_unpopulated_instance_reads_default(self):
        assert Specimen().counts == []
        assert Specimen().status == "unknown"

    def test_class_access_returns_declaration(self):
        assert isinstance(Specimen.counts, Attr)
        assert Specimen.counts.name == "counts"


# ---------------------------------------------------------------------------
# Reference
# ---------------------------------------------------------------------------
LINKED = """
<Linked orgid="ECOLI" frameid="L1">
  <owner><Person orgid="ECOLI" frameid="keseler"/></owner>
  <members>
    <Compound orgid="ECOLI" frameid="FUM"/>
    <Compound orgid="ECOLI" frameid="NA+"/>
  </members>
</Linked>
"""


class TestReferenceParsing:
    def test_identities_stored_unresolved(self):
        record = Linked.parse(_xml(LINKED))
        assert record._references["owner"] == Unresolved(Identity("ECOLI", "keseler"))
        assert record.owner_id == Identity("ECOLI", "keseler")
        assert record.members_ids == [Identity("ECOLI", "FUM"), Identity("ECOLI", "NA%2B")]

    def test_parse_does_not_fetch(self, object_cache):
        Linked.parse(_xml(LINKED))
        assert object_cache.fetch_count == 0

    def test_missing_references(self):
        record = Linked.parse(_xml('<Linked orgid="ECOLI" frameid="L2"/>'))
        assert record.owner_id is None
        assert record.members_ids == []
        assert record.owner is None
        assert record.members == []

    def test_required_reference_missing(self):
        with pytest.raises(ObjectInvalid) as excinfo:
            StrictLinked.parse(_xml('<StrictLinked orgid="ECOLI" frameid="S"/>'))
        assert excinfo.value.name == "owner"

    def test_reference_without_frameid(self):
        with pytest.raises(ObjectInvalid):
            Linked.parse(_xml('<Linked orgid="ECOLI" frameid="L3"><owner><Person orgid="ECOLI"/></owner></Linked>'))

    def test_empty_frameid_is_invalid(self):
        with pytest.raises(ObjectInvalid) as excinfo:
            Linked.parse(_xml('<Linked orgid="ECOLI" frameid="L4"><owner><Person orgid="ECOLI" frameid=""/></owner></Linked>'))
        assert excinfo.value.name == "owner"
        assert excinfo.value.model is Linked

    def test_id_view_names(self):
        assert Linked.owner.id_name == "owner_id"
        assert Linked.members.id_name == "members_ids"


class TestReferenceResolution:
    @pytest.fixture
    def linked_documents(self, documents):
        documents[("ECOLI", "keseler")] = '<Person orgid="ECOLI" frameid="keseler"><common-name datatype="string">Ingrid Keseler</common-name></Person>'
        documents[("ECOLI", "FUM")] = '<Compound orgid="ECOLI" frameid="FUM"/>'
        documents[("ECOLI", "NA+")] = '<Compound orgid="ECOLI" frameid="NA+"/>'
        return documents

    def test_resolved_on_first_read(self, object_cache, linked_documents):
        record = Linked.parse(_xml(LINKED))
        owner = record.owner
        assert owner.common_name == "Ingrid Keseler"
        assert isinstance(record._references["owner"], Resolved)

    def test_collection_resolution_keeps_order(self, object_cache, linked_documents):
        record = Linked.parse(_xml(LINKED))
        assert [member.frame for member in record.members] == ["FUM", "NA%2B"]
        assert object_cache.fetch_count == 2

    def test_plus_is_fetched_unescaped(self, object_cache, stub_fetch, linked_documents):
        Linked.parse(_xml(LINKED)).members
        stub_fetch.assert_any_call("ECOLI", "NA+", None)

    def test_resolved_value_is_kept_on_the_field(self, object_cache, linked_documents):
        record = Linked.parse(_xml(LINKED))
        owner = record.owner
        previous = set_cache(ObjectCache(fetch=lambda *args: pytest.fail("unexpected fetch")))
        try:
            assert record.owner is owner
        finally:
            set_cache(previous)

    def test_id_view_after_resolution(self, object_cache, linked_documents):
        record = Linked.parse(_xml(LINKED))
        record.members
        assert record.members_ids == [Identity("ECOLI", "FUM"), Identity("ECOLI", "NA+")]

    def test_writing_resolved_view_clears_identities(self, object_cache, linked_documents):
        record = Linked.parse(_xml(LINKED))
        person = Identity("ECOLI", "keseler").resolve()
        record.owner = person
        assert record._references["owner"] == Resolved(person)
        assert record.owner_id == person.identity

    def test_writing_id_view_clears_resolved_value(self, object_cache, linked_documents):
        record = Linked.parse(_xml(LINKED))
        record.owner
        record.owner_id = Identity("ECOLI", "FUM")
        assert record._references["owner"] == Unresolved(Identity("ECOLI", "FUM"))
        assert record.owner.frame == "FUM"

    def test_writing_none(self):
        record = Linked.parse(_xml(LINKED))
        record.owner = None
        assert record.owner is None
        assert record.owner_id is None

    def test_writing_none_to_collection(self):
        record = Linked.parse(_xml(LINKED))
        record.members = None
        assert record.members_ids == []

        record.members_ids = None
        assert record.members_ids == []
        assert record.members == []
