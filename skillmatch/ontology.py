"""
Ontology gateway: direct super-/sub-class lookup for skill concepts.

The scoring core only depends on the SkillGateway protocol. SkillOntology
is the in-memory implementation, built either from explicit edges (tests,
hand-written taxonomies) or from an OWL document in RDF/XML syntax.

Only asserted rdfs:subClassOf edges are indexed. No transitive closure or
other reasoning is performed.
"""

from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Protocol, Set, Tuple

import requests
from bs4 import BeautifulSoup

from .errors import OntologyUnavailableError
from .logger import get_logger
from .normalize import local_name, normalize_skill
from .retry import (
    RetryError,
    RetryableStatusError,
    exponential_backoff,
    should_retry_http_status,
)

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
OWL_NS = "http://www.w3.org/2002/07/owl#"

_PREFIXES = {RDF_NS: "rdf", RDFS_NS: "rdfs", OWL_NS: "owl"}


class SkillGateway(Protocol):
    """Anything that can report the direct neighborhood of a skill."""

    def super_classes_of(self, skill: str) -> Set[str]:
        ...

    def sub_classes_of(self, skill: str) -> Set[str]:
        ...


class SkillOntology:
    """
    Immutable skill hierarchy keyed by normalized skill identifiers.

    Safe to share between threads: nothing is mutated after __init__.
    """

    def __init__(self, edges: Iterable[Tuple[str, str]] = (), classes: Iterable[str] = ()):
        """
        Args:
            edges: (sub_class, super_class) pairs
            classes: extra class names with no hierarchy edges
        """
        supers: Dict[str, Set[str]] = {}
        subs: Dict[str, Set[str]] = {}
        known = {normalize_skill(c) for c in classes}

        for child, parent in edges:
            child, parent = normalize_skill(child), normalize_skill(parent)
            known.update((child, parent))
            if child == parent:
                continue
            supers.setdefault(child, set()).add(parent)
            subs.setdefault(parent, set()).add(child)

        self._supers = {k: frozenset(v) for k, v in supers.items()}
        self._subs = {k: frozenset(v) for k, v in subs.items()}
        self._classes = frozenset(known)

    @classmethod
    def from_mapping(cls, parents: Mapping[str, Iterable[str]]) -> "SkillOntology":
        """Build from {skill: [direct super-classes]}."""
        edges = [(child, parent) for child, ps in parents.items() for parent in ps]
        return cls(edges, classes=parents.keys())

    @property
    def classes(self) -> frozenset:
        return self._classes

    def super_classes_of(self, skill: str) -> Set[str]:
        return set(self._supers.get(normalize_skill(skill), ()))

    def sub_classes_of(self, skill: str) -> Set[str]:
        return set(self._subs.get(normalize_skill(skill), ()))

    def __contains__(self, skill: object) -> bool:
        return isinstance(skill, str) and normalize_skill(skill) in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def __repr__(self) -> str:
        edge_count = sum(len(v) for v in self._supers.values())
        return f"SkillOntology(classes={len(self._classes)}, edges={edge_count})"


# RDF/XML parsing


def _is_element(tag, namespace: str, name: str) -> bool:
    if tag.namespace == namespace and tag.name.split(":")[-1] == name:
        return True
    # Parsers that keep the qualified name instead of resolving namespaces
    return tag.name == f"{_PREFIXES[namespace]}:{name}"


def _attr(tag, namespace: str, name: str) -> Optional[str]:
    for key, value in tag.attrs.items():
        if getattr(key, "namespace", None) == namespace and getattr(key, "name", None) == name:
            return value
        if key == f"{_PREFIXES[namespace]}:{name}":
            return value
    return None


def _is_class_declaration(tag) -> bool:
    if _is_element(tag, OWL_NS, "Class") or _is_element(tag, RDFS_NS, "Class"):
        return True
    if not _is_element(tag, RDF_NS, "Description"):
        return False
    # <rdf:Description rdf:about="..."><rdf:type rdf:resource="owl#Class"/>
    class_types = (OWL_NS + "Class", RDFS_NS + "Class")
    return any(
        _is_element(child, RDF_NS, "type") and _attr(child, RDF_NS, "resource") in class_types
        for child in tag.find_all(True, recursive=False)
    )


def _subject_iri(tag, base: str) -> Optional[str]:
    about = _attr(tag, RDF_NS, "about")
    if about:
        return base + about if about.startswith("#") else about
    rdf_id = _attr(tag, RDF_NS, "ID")
    if rdf_id:
        return f"{base}#{rdf_id}"
    return None


def _object_iri(subclass_tag, base: str) -> Optional[str]:
    resource = _attr(subclass_tag, RDF_NS, "resource")
    if resource:
        return base + resource if resource.startswith("#") else resource
    # <rdfs:subClassOf><owl:Class rdf:about="..."/></rdfs:subClassOf>
    nested = subclass_tag.find(True)
    if nested is not None:
        return _subject_iri(nested, base)
    return None


def parse_owl(document: str | bytes, namespace: Optional[str] = None) -> SkillOntology:
    """
    Parse an OWL ontology serialized as RDF/XML.

    Args:
        document: RDF/XML text or bytes
        namespace: if given, only classes whose IRI starts with it are kept

    Returns:
        SkillOntology with class names reduced to lower-cased local names

    Raises:
        OntologyUnavailableError: if the document has no rdf:RDF root
    """
    if isinstance(document, str):
        document = document.encode("utf-8")
    soup = BeautifulSoup(document, "xml")

    root = next((t for t in soup.find_all(True) if _is_element(t, RDF_NS, "RDF")), None)
    if root is None:
        raise OntologyUnavailableError("Ontology document is not RDF/XML (no rdf:RDF root)")
    base = (root.get("xml:base") or "").rstrip("#")

    def in_scope(iri: str) -> bool:
        return not namespace or iri.startswith(namespace) or iri.startswith("#")

    classes = set()
    edges = []
    for tag in root.find_all(True):
        if _is_class_declaration(tag):
            iri = _subject_iri(tag, base)
            if iri and in_scope(iri):
                classes.add(local_name(iri))
        elif _is_element(tag, RDFS_NS, "subClassOf"):
            child = _subject_iri(tag.parent, base)
            parent = _object_iri(tag, base)
            # Anonymous restrictions have no IRI on either side
            if child and parent and in_scope(child) and in_scope(parent):
                edges.append((local_name(child), local_name(parent)))

    return SkillOntology(edges, classes)


# Loading


@exponential_backoff(
    max_retries=3,
    base_delay=1.0,
    exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, RetryableStatusError),
    on_retry=lambda attempt, e, delay: get_logger().warning(
        "Ontology download failed, retrying", attempt=attempt, delay=delay, error=str(e)
    ),
)
def _fetch_with_retry(url: str, timeout: float):
    resp = requests.get(url, timeout=timeout)
    if should_retry_http_status(resp.status_code):
        raise RetryableStatusError(resp.status_code, url)
    return resp


def fetch_ontology(url: str, timeout: float = 15.0) -> bytes:
    """Download an ontology document, retrying transient failures.

    Raises:
        OntologyUnavailableError: on any HTTP error or exhausted retries
    """
    logger = get_logger()
    try:
        resp = _fetch_with_retry(url, timeout)
        resp.raise_for_status()
    except RetryError as e:
        logger.error("Ontology download gave up", url=url, error=str(e))
        raise OntologyUnavailableError(f"Could not download ontology from {url}: {e}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.error("Ontology request failed", url=url, status=status)
        raise OntologyUnavailableError(f"Ontology request failed ({status}): {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Ontology request error", url=url, error=str(e))
        raise OntologyUnavailableError(f"Ontology request error: {e}") from e
    return resp.content


def load_ontology(
    source: str | Path,
    namespace: Optional[str] = None,
    timeout: float = 15.0,
) -> SkillOntology:
    """
    Load an OWL ontology from a file path or http(s) URL.

    The result is meant to be loaded once per run and passed explicitly to
    the scoring functions.

    Raises:
        OntologyUnavailableError: if the source is missing, unreachable or not RDF/XML
    """
    logger = get_logger()
    source = str(source)

    if source.startswith(("http://", "https://")):
        document = fetch_ontology(source, timeout=timeout)
    else:
        path = Path(source)
        if not path.is_file():
            logger.error("Ontology file not found", path=source)
            raise OntologyUnavailableError(f"Ontology file not found: {path}")
        try:
            document = path.read_bytes()
        except OSError as e:
            raise OntologyUnavailableError(f"Could not read ontology {path}: {e}") from e

    ontology = parse_owl(document, namespace=namespace)
    logger.record_ontology_load()
    logger.info("Loaded ontology", source=source, classes=len(ontology))
    if not len(ontology):
        logger.warning("Ontology has no classes in scope; only exact matches will score", source=source)
    return ontology
