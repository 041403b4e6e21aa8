"""Record kinds for ptools-xml documents.

Top-level kinds (``Compound``, ``Pathway``, ...) subclass
:class:`~biocyc.records.Entity` and are dispatched from the element name of a
fetched document. Nested kinds (``Left``, ``Km``, ``DbLink``, ...) subclass
:class:`~biocyc.records.Record` and only appear inside another record.
"""

from __future__ import annotations

from functools import cached_property

from biocyc import web_services
from biocyc.fields import Attr, Reference
from biocyc.records import Entity, Record


def _string(tag: str) -> str:
    return f"{tag}[@datatype = 'string']/text()"


def _split(value: str | None) -> list[str]:
    return str(value or "").split()


# ---------------------------------------------------------------------------
# Chemical Markup Language
# ---------------------------------------------------------------------------

class Atom(Record):
    id = Attr("@id")
    element_type = Attr("@elementType")
    formal_charge = Attr("@formalCharge", kind="integer", default=0)
    x2 = Attr("@x2", kind="float")
    y2 = Attr("@y2", kind="float")


class Bond(Record):
    id = Attr("@id")
    atom_refs = Attr("@atomRefs", default="", transform=_split)
    order = Attr("@order", kind="integer")


class Molecule(Record):
    id = Attr("@id")
    title = Attr("@title")
    formal_charge = Attr("@formalCharge", kind="integer", default=0)
    formula = Attr("formula/@concise")
    molecular_weight = Attr("float[@title = 'molecularWeight']/text()", kind="float_with_units")
    smiles = Attr("string[@title = 'smiles']/text()")

    atoms = Attr("atomArray/atom", kind=Atom, collection=True)
    bonds = Attr("bondArray/bond", kind=Bond, collection=True)


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------

class Cofactor(Record):
    citation = Reference("citation/Publication")
    compound = Reference("Compound")


class Component(Record):
    coefficient = Attr("coefficient[@datatype = 'integer']/text()", kind="integer", default=1)

    citation = Reference("citation/Publication")
    protein = Reference("Protein")


class Created(Record):
    date = Attr("date[@datatype = 'date']/text()", kind="date")

    organization = Reference("Organization")
    person = Reference("Person")


class LastCurated(Record):
    date = Attr("date[@datatype = 'date']/text()", kind="date")

    organization = Reference("Organization")
    person = Reference("Person")


class Credits(Record):
    created = Attr("created", kind=Created)
    last_curated = Attr("last-curated", kind=LastCurated)


class DbLink(Record):
    db = Attr("dblink-db/text()")
    oid = Attr("dblink-oid/text()")
    relationship = Attr("dblink-relationship/text()")
    url = Attr("dblink-url/text() | dblink-URL/text()")


class ECNumber(Record):
    value = Attr("text()")
    official = Attr("official/text()")


class Evidence(Record):
    with_ = Attr(_string("with"))

    evidence_code = Reference("Evidence-Code")
    publication = Reference("Publication")


class Km(Record):
    value = Attr("value/text()", kind="integer_with_units")

    citation = Reference("citation/Publication")
    substrate = Reference("substrate/Compound")


class Left(Record):
    coefficient = Attr("coefficient[@datatype = 'integer']/text()", kind="integer", default=1)

    object = Reference("Compound | Protein | RNA")


class Right(Record):
    coefficient = Attr("coefficient[@datatype = 'integer']/text()", kind="integer", default=1)

    object = Reference("Compound | Protein | RNA")


class MolecularWeightExp(Record):
    value = Attr("text()", kind="float_with_units")

    citation = Reference("citation/Publication")


class Pi(Record):
    value = Attr("text()", kind="float_with_units")

    citation = Reference("citation/Publication")


class ReactionDirection(Record):
    value = Attr("text()")

    citation = Reference("citation/Publication")


class ReactionLayout(Record):
    direction = Attr("direction/text()")

    left_primaries = Reference("left-primaries/*", collection=True)
    object = Reference("Reaction | Pathway")
    right_primaries = Reference("right-primaries/*", collection=True)


class ReactionOrdering(Record):
    predecessor_reactions = Reference("predecessor-reactions/Reaction", collection=True)
    reaction = Reference("Reaction")


# ---------------------------------------------------------------------------
# Top-level objects
# ---------------------------------------------------------------------------

class Compound(Entity):
    is_class = Attr("@class", kind="boolean", default=False)
    instance = Reference("instance/Compound", collection=True)
    parent = Reference("parent/Compound", collection=True)

    comment = Attr(_string("comment"))
    common_name = Attr(_string("common-name"))
    synonym = Attr(_string("synonym"), collection=True)

    gibbs_0 = Attr("gibbs-0[@datatype = 'float']/text()", kind="float_with_units")
    inchi = Attr(_string("inchi"))
    inchi_key = Attr(_string("inchi-key"))
    molecular_weight = Attr("molecular-weight[@datatype = 'float']/text()", kind="float_with_units")

    appears_in_left_side_of = Reference("appears-in-left-side-of/Reaction", collection=True)
    appears_in_right_side_of = Reference("appears-in-right-side-of/Reaction", collection=True)
    cml_molecule = Attr("cml/molecule", kind=Molecule)
    dblink = Attr("dblink", kind=DbLink, collection=True)
    regulates = Reference("regulates/Regulation", collection=True)


class EnzymaticReaction(Entity):
    is_class = Attr("@class", kind="boolean", default=False)

    comment = Attr(_string("comment"))
    common_name = Attr(_string("common-name"))
    synonym = Attr(_string("synonym"), collection=True)

    physiologically_relevant = Attr(
        "physiologically-relevant[@datatype = 'boolean']/text()", kind="boolean", default=False,
    )

    cofactor = Attr("cofactor", kind=Cofactor, collection=True)
    enzyme = Reference("enzyme/Protein", collection=True)
    evidence = Attr("evidence", kind=Evidence, collection=True)
    km = Attr("km", kind=Km)
    reaction_direction = Attr("reaction-direction", kind=ReactionDirection)
    reaction = Reference("reaction/Reaction", collection=True)
    regulated_by = Reference("regulated-by/Regulation", collection=True)


class EvidenceCode(Entity):
    is_class = Attr("@class", kind="boolean", default=False)
    instance = Reference("instance/Evidence-Code", collection=True)
    parent = Reference("parent/Evidence-Code")

    comment = Attr(_string("comment"))
    common_name = Attr(_string("common-name"))
    synonym = Attr(_string("synonym"), collection=True)


class Organization(Entity):
    abbrev_name = Attr(_string("abbrev-name"))
    common_name = Attr(_string("common-name"))
    email = Attr(_string("email"))
    url = Attr(_string("url"))


class Pathway(Entity):
    is_class = Attr("@class", kind="boolean", default=False)
    instance = Reference("instance/Pathway", collection=True)
    parent = Reference("parent/Pathway", collection=True)

    comment = Attr(_string("comment"))
    common_name = Attr(_string("common-name"))
    synonym = Attr(_string("synonym"), collection=True)

    citation = Reference("citation/Publication", collection=True)
    credits = Attr("credits", kind=Credits)
    evidence = Attr("evidence", kind=Evidence, collection=True)
    in_pathway = Reference("in-pathway/Pathway", collection=True)
    reaction_layout = Attr("reaction-layout", kind=ReactionLayout, collection=True)
    reaction_list = Reference("reaction-list/*", collection=True)
    reaction_ordering = Attr("reaction-ordering", kind=ReactionOrdering, collection=True)
    sub_pathway = Reference("sub-pathway/Pathway", collection=True)
    super_pathway = Reference("super-pathway/Pathway", collection=True)


class Person(Entity):
    common_name = Attr(_string("common-name"))
    email = Attr(_string("email"))

    affiliations = Reference("affiliations/Organization", collection=True)


class Protein(Entity):
    is_class = Attr("@class", kind="boolean", default=False)
    instance = Reference("instance/Protein", collection=True)
    parent = Reference("parent/Protein", collection=True)

    comment = Attr(_string("comment"))
    common_name = Attr(_string("common-name"))
    synonym = Attr(_string("synonym"), collection=True)

    molecular_weight_exp = Attr("molecular-weight-exp[@datatype = 'float']", kind=MolecularWeightExp)

    catalyzes = Reference("catalyzes/Enzymatic-Reaction", collection=True)
    citation = Reference("citation/Publication", collection=True)
    component_of = Reference("component-of/Protein", collection=True)
    component = Attr("component", kind=Component, collection=True)
    credits = Attr("credits", kind=Credits)
    dblink = Attr("dblink", kind=DbLink, collection=True)
    has_feature = Reference("has-feature/Feature", collection=True)
    gene = Reference("gene/Gene", collection=True)
    pi = Attr("pi[@datatype = 'float']", kind=Pi)


class Publication(Entity):
    author = Attr(_string("author"), collection=True)
    pubmed_id = Attr(_string("pubmed-id"))
    source = Attr(_string("source"))
    title = Attr(_string("title"))
    year = Attr("year[@datatype = 'integer']/text()", kind="integer")


class Reaction(Entity):
    is_class = Attr("@class", kind="boolean", default=False)
    instance = Reference("instance/Reaction", collection=True)
    parent = Reference("parent/Reaction", collection=True)

    comment = Attr(_string("comment"))
    common_name = Attr(_string("common-name"))
    synonym = Attr(_string("synonym"), collection=True)

    physiologically_relevant = Attr(
        "physiologically-relevant[@datatype = 'boolean']/text()", kind="boolean", default=False,
    )

    ec_number = Attr("ec-number", kind=ECNumber)
    enzymatic_reaction = Reference("enzymatic-reaction/Enzymatic-Reaction", collection=True)
    in_pathway = Reference("in-pathway/Pathway", collection=True)
    left = Attr("left", kind=Left, collection=True)
    reaction_direction = Attr("reaction-direction", kind=ReactionDirection)
    right = Attr("right", kind=Right, collection=True)

    @cached_property
    def atom_mappings(self) -> list[dict[str, str]]:
        """Atom mappings of this reaction, downloaded on first access."""
        return web_services.download_atom_mappings(
            self.identity.unescaped_realm, self.identity.unescaped_frame,
        )


class Regulation(Entity):
    is_class = Attr("@class", kind="boolean", default=False)
    instance = Reference("instance/Reaction", collection=True)
    parent = Reference("parent/Reaction", collection=True)

    comment = Attr(_string("comment"))

    mode = Attr(_string("mode"))
    physiologically_relevant = Attr(
        "physiologically-relevant[@datatype = 'boolean']/text()", kind="boolean", default=False,
    )

    citation = Reference("citation/Publication")
    regulated_entity = Reference("regulated-entity/Enzymatic-Reaction")
    regulator = Reference("regulator/Compound")


# Kinds the web services return that carry no mapped fields yet.

class Complex(Entity):
    pass


class DNABindingSite(Entity):
    pass


class Feature(Entity):
    pass


class Gene(Entity):
    pass


class GeneticElement(Entity):
    pass


class GOTerm(Entity):
    pass


class MRNABindingSite(Entity):
    pass


class Organism(Entity):
    pass


class Promoter(Entity):
    pass


class RNA(Entity):
    pass


class Terminator(Entity):
    pass


class TranscriptionUnit(Entity):
    pass
