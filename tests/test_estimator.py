import logging

import numpy as np
import pytest

from feedgraph.errors import NumericalDegeneracyError
from feedgraph.estimator import ObservationEstimator, estimated_component, observed_component
from feedgraph.graphs import FeedbackGraphCatalog


def test_full_graph_realized_observes_everything(two_graph_catalog, uniform_meta):
    probs = np.array([0.6, 0.4])
    observed = two_graph_catalog.observed_set(1, 0)
    q = ObservationEstimator().estimate(two_graph_catalog, 1, probs, uniform_meta, observed)
    np.testing.assert_allclose(q, [1.0, 1.0])


def test_self_graph_realized_mixes_in_other_candidate(two_graph_catalog, uniform_meta):
    probs = np.array([0.6, 0.4])
    observed = two_graph_catalog.observed_set(0, 0)

    np.testing.assert_allclose(
        observed_component(two_graph_catalog, 0, probs, observed), [0.6, 0.0]
    )
    np.testing.assert_allclose(
        estimated_component(two_graph_catalog, 0, probs, uniform_meta, observed), [0.2, 0.2]
    )
    q = ObservationEstimator().estimate(two_graph_catalog, 0, probs, uniform_meta, observed)
    np.testing.assert_allclose(q, [0.8, 0.2])


def test_other_candidates_are_summed():
    eye = np.eye(2)
    full = np.ones((2, 2))
    catalog = FeedbackGraphCatalog([eye, full, full])
    p_meta = np.array([[0.5, 0.5], [0.25, 0.25], [0.25, 0.25]])
    probs = np.array([0.5, 0.5])
    observed = catalog.observed_set(0, 0)
    # both complete candidates see j=1 unconfirmed: 2 * 0.25 * 0.5
    np.testing.assert_allclose(
        estimated_component(catalog, 0, probs, p_meta, observed), [0.25, 0.25]
    )


def test_vanishing_estimate_raises():
    catalog = FeedbackGraphCatalog([np.eye(2), np.eye(2)])
    probs = np.array([1.0, 0.0])
    observed = catalog.observed_set(0, 0)
    with pytest.raises(NumericalDegeneracyError) as excinfo:
        ObservationEstimator().estimate(catalog, 0, probs, np.full((2, 2), 0.5), observed)
    assert excinfo.value.quantity == "observation_probability"


def test_vanishing_estimate_floored_when_clipping(caplog):
    catalog = FeedbackGraphCatalog([np.eye(2), np.eye(2)])
    probs = np.array([1.0, 0.0])
    observed = catalog.observed_set(0, 0)
    est = ObservationEstimator(floor_epsilon=1e-9, clip=True)
    with caplog.at_level(logging.WARNING, logger="feedgraph.estimator"):
        q = est.estimate(catalog, 0, probs, np.full((2, 2), 0.5), observed)
    np.testing.assert_allclose(q, [1.0, 1e-9])
    assert "flooring" in caplog.text
