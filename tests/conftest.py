"""Shared test fixtures for the BioCyc test suite."""

from unittest.mock import MagicMock

import pytest
from lxml import etree

from biocyc.cache import ObjectCache, set_cache


def _ptools(*records: str) -> bytes:
    """Wrap record elements in a ptools-xml document."""
    body = "\n".join(records)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<ptools-xml ptools-version="19.0">\n'
        "<metadata><PGDB orgid=\"ECOLI\" version=\"19.0\"/></metadata>\n"
        f"{body}\n"
        "</ptools-xml>\n"
    ).encode("utf-8")


@pytest.fixture
def ptools():
    """Build ptools-xml bytes from record element strings."""
    return _ptools


@pytest.fixture
def documents():
    """Records served by the stub transport, keyed by (orgid, frameid)."""
    return {}


@pytest.fixture
def stub_fetch(documents):
    """A fetch function serving ``documents``; unknown keys get an Error element."""

    def fetch(orgid, frameid, detail=None):
        record = documents.get((orgid, frameid))
        if record is None:
            record = f'<Error orgid="{orgid}" frameid="{frameid}">Object not found</Error>'
        return etree.fromstring(_ptools(record))

    return MagicMock(side_effect=fetch)


@pytest.fixture
def object_cache(stub_fetch):
    """An ObjectCache over the stub transport, installed as the process-wide cache."""
    cache = ObjectCache(fetch=stub_fetch)
    previous = set_cache(cache)
    yield cache
    set_cache(previous)


@pytest.fixture
def fumarase_documents(documents):
    """A small reaction graph around ECOLI:FUMHYDR-RXN."""
    documents[("ECOLI", "FUMHYDR-RXN")] = """
<Reaction ID="ECOLI:FUMHYDR-RXN" orgid="ECOLI" frameid="FUMHYDR-RXN" detail="full">
  <parent><Reaction resource="getxml?META:Small-Molecule-Reactions" orgid="META" frameid="Small-Molecule-Reactions" class="true"/></parent>
  <common-name datatype="string">fumarate hydratase</common-name>
  <synonym datatype="string">fumarase</synonym>
  <synonym datatype="string">L-malate hydro-lyase</synonym>
  <physiologically-relevant datatype="boolean">true</physiologically-relevant>
  <ec-number>4.2.1.2<official>true</official></ec-number>
  <enzymatic-reaction>
    <Enzymatic-Reaction resource="getxml?ECOLI:FUMARASE-A-RXN" orgid="ECOLI" frameid="FUMARASE-A-RXN"/>
    <Enzymatic-Reaction resource="getxml?ECOLI:FUMARASE-C-RXN" orgid="ECOLI" frameid="FUMARASE-C-RXN"/>
  </enzymatic-reaction>
  <in-pathway><Pathway resource="getxml?ECOLI:TCA" orgid="ECOLI" frameid="TCA"/></in-pathway>
  <left><Compound resource="getxml?ECOLI:FUM" orgid="ECOLI" frameid="FUM"/></left>
  <left><Compound resource="getxml?ECOLI:WATER" orgid="ECOLI" frameid="WATER"/></left>
  <right><coefficient datatype="integer">1</coefficient><Compound resource="getxml?ECOLI:MAL" orgid="ECOLI" frameid="MAL"/></right>
  <reaction-direction>REVERSIBLE</reaction-direction>
</Reaction>"""
    documents[("ECOLI", "TCA")] = """
<Pathway ID="ECOLI:TCA" orgid="ECOLI" frameid="TCA" detail="full">
  <common-name datatype="string">TCA cycle I (prokaryotic)</common-name>
  <reaction-list>
    <Reaction resource="getxml?ECOLI:FUMHYDR-RXN" orgid="ECOLI" frameid="FUMHYDR-RXN"/>
  </reaction-list>
</Pathway>"""
    documents[("ECOLI", "FUM")] = """
<Compound ID="ECOLI:FUM" orgid="ECOLI" frameid="FUM" detail="full">
  <common-name datatype="string">fumarate</common-name>
  <molecular-weight datatype="float" units="Da">114.057</molecular-weight>
  <appears-in-left-side-of><Reaction orgid="ECOLI" frameid="FUMHYDR-RXN"/></appears-in-left-side-of>
</Compound>"""
    return documents
