import pytest

from wincon.logistic import coefficient_per_unit, fit_logistic_ridge, predict_logistic, sigmoid


def test_sigmoid_is_stable_at_extremes() -> None:
    assert sigmoid(0.0) == 0.5
    assert sigmoid(1000.0) == pytest.approx(1.0)
    assert sigmoid(-1000.0) == pytest.approx(0.0)


def test_separable_feature_gets_positive_coefficient() -> None:
    model = fit_logistic_ridge([[-1.0], [1.0]], [0.0, 1.0], ["x"], lam=0.0, iterations=4000, lr=1.0)
    assert model is not None
    assert model.coefficients[1] > 0
    assert predict_logistic(model, [1.0]) > 0.5
    assert predict_logistic(model, [-1.0]) < 0.5


def test_penalty_shrinks_coefficients() -> None:
    X = [[-2.0], [-1.0], [1.0], [2.0]]
    y = [0.0, 0.0, 1.0, 1.0]
    loose = fit_logistic_ridge(X, y, ["x"], lam=0.0)
    tight = fit_logistic_ridge(X, y, ["x"], lam=10.0)
    assert abs(tight.coefficients[1]) < abs(loose.coefficients[1])


def test_empty_or_mismatched_input_returns_none() -> None:
    assert fit_logistic_ridge([], [], ["x"]) is None
    assert fit_logistic_ridge([[1.0], [2.0]], [1.0], ["x"]) is None


def test_constant_column_does_not_break_standardisation() -> None:
    model = fit_logistic_ridge([[3.0], [3.0], [3.0]], [0.0, 1.0, 1.0], ["flat"])
    assert model.stds == (1.0,)
    assert model.coefficients[1] == pytest.approx(0.0)


def test_coefficient_per_unit_undoes_scaling() -> None:
    X = [[0.0], [10.0], [20.0], [30.0]]
    model = fit_logistic_ridge(X, [0.0, 0.0, 1.0, 1.0], ["lead"])
    assert coefficient_per_unit(model, "lead") == pytest.approx(model.coefficients[1] / model.stds[0])
    assert coefficient_per_unit(model, "missing") is None


def test_converges_before_iteration_cap() -> None:
    X = [[-2.0], [-1.0], [1.0], [2.0]]
    model = fit_logistic_ridge(X, [0.0, 1.0, 0.0, 1.0], ["x"], lam=1.0, iterations=4000, lr=0.1)
    assert model.converged is True
    assert model.iterations == 4000


def test_iteration_cap_leaves_model_unconverged() -> None:
    X = [[-2.0], [-1.0], [1.0], [2.0]]
    model = fit_logistic_ridge(X, [0.0, 0.0, 1.0, 1.0], ["x"], lam=1.0, iterations=1, lr=0.1)
    assert model.converged is False
    assert model.coefficients[1] > 0
