"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from skillmatch.env import DEFAULT_NAMESPACE
from skillmatch.logger import get_logger, reset_logger
from skillmatch.ontology import SkillOntology, parse_owl

NS = DEFAULT_NAMESPACE


class StubGateway:
    """Gateway with fabricated relations that counts lookups."""

    def __init__(self, supers=None, subs=None):
        self.supers = supers or {}
        self.subs = subs or {}
        self.calls = []

    def super_classes_of(self, skill):
        self.calls.append(("super", skill))
        return set(self.supers.get(skill, ()))

    def sub_classes_of(self, skill):
        self.calls.append(("sub", skill))
        return set(self.subs.get(skill, ()))


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path_factory):
    """Route the global logger to a temp dir with console output off."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path_factory.mktemp("logs"), enable_console=False)
    yield logger
    for handler in logger.logger.handlers:
        handler.close()
    reset_logger()


@pytest.fixture
def sample_owl() -> str:
    """Small software-engineering ontology in RDF/XML."""
    base = NS.rstrip("#")
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns="{NS}"
     xml:base="{base}"
     xmlns:owl="http://www.w3.org/2002/07/owl#"
     xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
     xmlns:rdfs="http://www.w3.org/2000/01/rdf-schema#">
    <owl:Ontology rdf:about="{base}"/>

    <owl:Class rdf:about="{NS}Programming-Language"/>
    <owl:Class rdf:about="{NS}Query-Language"/>

    <owl:Class rdf:about="{NS}Java">
        <rdfs:subClassOf rdf:resource="{NS}Programming-Language"/>
    </owl:Class>

    <owl:Class rdf:about="{NS}Python">
        <rdfs:subClassOf rdf:resource="#Programming-Language"/>
    </owl:Class>

    <owl:Class rdf:ID="Kotlin">
        <rdfs:subClassOf>
            <owl:Class rdf:about="{NS}Programming-Language"/>
        </rdfs:subClassOf>
    </owl:Class>

    <owl:Class rdf:about="{NS}SQL">
        <rdfs:subClassOf rdf:resource="{NS}Query-Language"/>
    </owl:Class>

    <owl:Class rdf:about="{NS}Spring">
        <rdfs:subClassOf rdf:resource="{NS}Java"/>
        <rdfs:subClassOf>
            <owl:Restriction>
                <owl:onProperty rdf:resource="{NS}uses"/>
                <owl:someValuesFrom rdf:resource="{NS}Java"/>
            </owl:Restriction>
        </rdfs:subClassOf>
    </owl:Class>

    <owl:Class rdf:about="{NS}Jakarta-EE">
        <rdfs:subClassOf rdf:resource="{NS}Java"/>
    </owl:Class>

    <owl:Class rdf:about="http://example.org/cooking#Baking">
        <rdfs:subClassOf rdf:resource="{NS}Java"/>
    </owl:Class>
</rdf:RDF>
"""


@pytest.fixture
def ontology(sample_owl) -> SkillOntology:
    """Parsed sample ontology restricted to the software-engineering namespace."""
    return parse_owl(sample_owl, namespace=NS)


@pytest.fixture
def owl_file(tmp_path, sample_owl) -> Path:
    path = tmp_path / "software-engineering.ontology.owl"
    path.write_text(sample_owl, encoding="utf-8")
    return path


@pytest.fixture
def stub_gateway():
    """Factory for StubGateway instances."""
    return StubGateway


@pytest.fixture
def valid_batch() -> Dict[str, Any]:
    """Batch document with three well-formed pairs."""
    return {
        "offersAndResumes": [
            {"id": "exact", "offerSkills": ["Java", "SQL"], "resumeSkills": ["java", "sql"]},
            {"offerSkills": ["java"], "resumeSkills": ["\"Programming-Language\""]},
            {"offerSkills": ["python"], "resumeSkills": ["javascript"]},
        ]
    }


@pytest.fixture
def batch_file(tmp_path, valid_batch) -> Path:
    path = tmp_path / "offers_and_resumes.json"
    path.write_text(json.dumps(valid_batch, indent=2))
    return path
