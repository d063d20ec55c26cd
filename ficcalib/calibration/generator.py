"""
Rates providers generated from a flat parameter vector.

The generator holds the known data (earlier groups, FX, fixings) and the
definitions of one group. Curve metadata and node times do not depend on the
parameters, so they are computed once here rather than at every iteration.
"""

from datetime import date
from typing import Dict, Mapping, Optional, Sequence

import numpy as np

from ficcalib.curves.base import CurveName
from ficcalib.curves.definition.curve import CurveDefinitionError, InterpolatedCurveDefinition
from ficcalib.curves.nodal import InterpolatedNodalCurve
from ficcalib.curves.parameters import JacobianCalibrationMatrix
from ficcalib.pricing.provider import ImmutableRatesProvider


class ImmutableRatesProviderGenerator:
    """Builds a provider combining the known data with the curves of one group."""

    def __init__(
        self,
        known_provider: ImmutableRatesProvider,
        curve_definitions: Sequence[InterpolatedCurveDefinition],
        discount_names: Mapping[str, CurveName],
        index_names: Mapping[str, CurveName],
    ):
        """
        Args:
            known_provider: Curves and data already available
            curve_definitions: Definitions of the curves to generate, in parameter order
            discount_names: Curve name per currency to discount
            index_names: Curve name per index to forward
        """
        self.known_provider = known_provider
        self.curve_definitions = list(curve_definitions)
        self.discount_names = dict(discount_names)
        self.index_names = dict(index_names)

        names = [d.name for d in self.curve_definitions]
        for role, curve_name in list(self.discount_names.items()) + list(self.index_names.items()):
            if curve_name not in names:
                raise CurveDefinitionError(f"{role} refers to unknown curve {curve_name}")

        valuation_date = known_provider.valuation_date
        self._metadata = {d.name: d.metadata(valuation_date) for d in self.curve_definitions}
        self._x_values = {
            d.name: d.x_values(valuation_date, self._metadata[d.name]) for d in self.curve_definitions
        }

    @property
    def valuation_date(self) -> date:
        return self.known_provider.valuation_date

    @property
    def parameter_count(self) -> int:
        return sum(d.parameter_count for d in self.curve_definitions)

    def curves(
        self,
        parameters: Sequence[float],
        jacobians: Optional[Mapping[CurveName, JacobianCalibrationMatrix]] = None,
    ) -> Dict[CurveName, InterpolatedNodalCurve]:
        """Cut the parameter vector by curve and build each curve."""
        parameters = np.asarray(parameters, dtype=float)
        if parameters.shape != (self.parameter_count,):
            raise ValueError(
                f"Expected {self.parameter_count} parameters, got shape {parameters.shape}"
            )
        curves = {}
        start = 0
        for definition in self.curve_definitions:
            end = start + definition.parameter_count
            metadata = self._metadata[definition.name]
            if jacobians is not None and definition.name in jacobians:
                metadata = metadata.with_jacobian(jacobians[definition.name])
            curves[definition.name] = definition.curve(
                self.valuation_date,
                parameters[start:end],
                metadata,
                self._x_values[definition.name],
            )
            start = end
        return curves

    def generate(
        self,
        parameters: Sequence[float],
        jacobians: Optional[Mapping[CurveName, JacobianCalibrationMatrix]] = None,
    ) -> ImmutableRatesProvider:
        """Provider with the known data plus the group curves built from ``parameters``.

        When ``jacobians`` is given, each generated curve carries its Jacobian
        in its metadata.
        """
        curves = self.curves(parameters, jacobians)
        return self.known_provider.with_curves(
            discount_curves={c: curves[n] for c, n in self.discount_names.items()},
            index_curves={i: curves[n] for i, n in self.index_names.items()},
        )
