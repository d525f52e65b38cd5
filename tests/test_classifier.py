import pytest

from helpers import graph, ids

from shadejar.banned import DEFAULT_BANNED_LIBRARIES
from shadejar.classifier import all_children, classify, self_and_all_children
from shadejar.errors import GraphIntegrityError, InputContractError
from shadejar.types import ModuleGraph, ModuleId, ResolvedModule

EMPTY = graph({})


def _classify(shaded, unshaded=EMPTY):
    return classify(shaded, unshaded, shaded.direct, DEFAULT_BANNED_LIBRARIES.is_banned)


def test_banned_subtree_is_rejected_at_its_root():
    shaded = graph(
        {
            "com.acme:lib": ["org.slf4j:jcl-over-slf4j"],
            "org.slf4j:jcl-over-slf4j": ["com.acme:helper"],
            "com.acme:helper": [],
        },
        direct=["com.acme:lib"],
    )

    result = _classify(shaded)

    assert ids(result.accepted) == {"com.acme:lib"}
    assert ids(result.rejected) == {"org.slf4j:jcl-over-slf4j"}


def test_only_shallowest_banned_module_is_reported():
    shaded = graph(
        {
            "com.acme:lib": ["org.slf4j:jul-to-slf4j"],
            "org.slf4j:jul-to-slf4j": ["org.slf4j:slf4j-api"],
            "org.slf4j:slf4j-api": [],
        },
        direct=["com.acme:lib"],
    )

    result = _classify(shaded)

    assert ids(result.rejected) == {"org.slf4j:jul-to-slf4j"}
    assert "org.slf4j:slf4j-api" not in ids(result.accepted)


def test_direct_declaration_overrides_ban():
    shaded = graph(
        {
            "org.slf4j:slf4j-api": ["com.acme:helper"],
            "com.acme:helper": [],
        },
        direct=["org.slf4j:slf4j-api"],
    )

    result = _classify(shaded)

    assert result.rejected == frozenset()
    assert ids(result.accepted) == {"org.slf4j:slf4j-api", "com.acme:helper"}


def test_direct_declaration_still_excluded_below_another_banned_root():
    shaded = graph(
        {
            "com.acme:lib": ["org.slf4j:jul-to-slf4j"],
            "org.slf4j:jul-to-slf4j": ["org.slf4j:slf4j-api"],
            "org.slf4j:slf4j-api": [],
        },
        direct=["com.acme:lib", "org.slf4j:slf4j-api"],
    )

    result = _classify(shaded)

    assert ids(result.rejected) == {"org.slf4j:jul-to-slf4j"}
    assert ids(result.accepted) == {"com.acme:lib"}


def test_direct_override_ignores_version():
    shaded = ModuleGraph.from_dict(
        {
            "direct": ["org.slf4j:slf4j-api:1.7.36"],
            "modules": [{"id": "org.slf4j:slf4j-api", "version": "2.0.9"}],
        }
    )

    result = _classify(shaded)

    assert ids(result.accepted) == {"org.slf4j:slf4j-api"}
    assert not result.rejected


def test_modules_on_the_regular_classpath_are_neither_accepted_nor_rejected():
    shaded = graph(
        {
            "com.acme:lib": ["com.google.guava:guava", "log4j:log4j"],
            "com.google.guava:guava": [],
            "log4j:log4j": [],
        },
        direct=["com.acme:lib"],
    )
    unshaded = ModuleGraph.of(
        [
            ResolvedModule(ModuleId("com.google.guava", "guava"), version="32.0"),
            ResolvedModule(ModuleId("log4j", "log4j"), version="1.2.17"),
        ]
    )

    result = _classify(shaded, unshaded)

    assert ids(result.accepted) == {"com.acme:lib"}
    assert not result.rejected


def test_diamond_dependencies_are_visited_once():
    shaded = graph(
        {
            "a:a": ["b:b", "c:c"],
            "b:b": ["d:d"],
            "c:c": ["d:d"],
            "d:d": [],
        }
    )

    assert ids(all_children(shaded, [shaded.get(ModuleId("a", "a"))])) == {"b:b", "c:c", "d:d"}
    assert ids(self_and_all_children(shaded, [shaded.get(ModuleId("b", "b"))])) == {"b:b", "d:d"}


def test_banned_module_shared_by_accepted_parents_is_excluded_everywhere():
    shaded = graph(
        {
            "a:a": ["com.palantir.tracing:tracing"],
            "b:b": ["com.palantir.tracing:tracing"],
            "com.palantir.tracing:tracing": ["com.palantir.tracing:tracing-api"],
            "com.palantir.tracing:tracing-api": ["x:x"],
            "x:x": [],
        },
        direct=["a:a", "b:b"],
    )

    result = _classify(shaded)

    assert ids(result.accepted) == {"a:a", "b:b"}
    assert ids(result.rejected) == {"com.palantir.tracing:tracing"}


@pytest.mark.parametrize(
    "edges, direct",
    [
        ({"a:a": ["org.slf4j:x"], "org.slf4j:x": ["b:b"], "b:b": []}, ["a:a"]),
        ({"log4j:log4j": ["a:a"], "a:a": ["commons-logging:y"], "commons-logging:y": []}, []),
        ({"org.slf4j:x": [], "log4j:log4j": ["org.slf4j:x"]}, ["org.slf4j:x"]),
    ],
)
def test_accepted_and_rejected_are_disjoint_subsets_of_shaded_only(edges, direct):
    shaded = graph(edges, direct=direct)

    result = _classify(shaded)

    assert not (result.accepted & result.rejected)
    assert (result.accepted | result.rejected) <= set(shaded)


def test_module_identity_ignores_version():
    older = ResolvedModule(ModuleId("g", "a"), version="1")
    newer = ResolvedModule(ModuleId("g", "a"), version="2")

    assert older == newer
    assert len({older, newer}) == 1


def test_graph_rejects_child_outside_the_arena():
    with pytest.raises(GraphIntegrityError):
        ModuleGraph.of([ResolvedModule(ModuleId("a", "a"), children=(ModuleId("missing", "child"),))])


def test_duplicate_module_entries_are_rejected():
    with pytest.raises(GraphIntegrityError) as excinfo:
        ModuleGraph.from_dict(
            {
                "direct": ["com.acme:lib"],
                "modules": [
                    {"id": "com.acme:lib", "children": ["org.slf4j:jcl-over-slf4j"]},
                    {"id": "org.slf4j:jcl-over-slf4j", "children": ["com.acme:helper"]},
                    {"id": "com.acme:helper"},
                    {"id": "org.slf4j:jcl-over-slf4j"},
                ],
            }
        )

    assert "org.slf4j:jcl-over-slf4j" in str(excinfo.value)


def test_graph_entry_without_group_is_rejected():
    with pytest.raises(InputContractError):
        ModuleGraph.from_dict({"modules": [{"name": "orphan"}]})


def test_graph_entry_with_group_and_name():
    shaded = ModuleGraph.from_dict({"modules": [{"group": "com.acme", "name": "lib", "version": "1.0"}]})

    assert ids(shaded) == {"com.acme:lib"}
