"""Ordering individuals by fitness, with unevaluated ones ranked lowest."""

from __future__ import annotations

from typing import Iterable, TypeVar

from ealib.evolution.individual import Individual

T = TypeVar("T", bound=Individual)


class Selection:
    """Fitness ranking and elite preservation."""

    @staticmethod
    def fitness_sort_key(individual: Individual) -> tuple:
        """Sort key ``(not null, fitness)``; nulls rank below evaluated values."""

        fitness = individual.fitness
        return (not fitness.is_null(), fitness)

    @staticmethod
    def sort_by_fitness(individuals: Iterable[T], reverse: bool = False) -> list[T]:
        """Return individuals sorted by fitness, worst first unless reverse.

        Null fitness counts as worse than any evaluated value. The sort is
        stable, so ties keep their input order.
        """

        return sorted(individuals, key=Selection.fitness_sort_key, reverse=reverse)

    @staticmethod
    def get_elites(individuals: Iterable[T], elite_count: int) -> list[T]:
        """Return the top elite_count individuals, best first."""

        ranked = Selection.sort_by_fitness(individuals, reverse=True)
        elite_count = max(0, min(elite_count, len(ranked)))
        return ranked[:elite_count]

    @staticmethod
    def best_individual(individuals: Iterable[T]) -> T:
        """Return the individual with the highest fitness."""

        ranked = Selection.sort_by_fitness(individuals, reverse=True)
        if not ranked:
            raise ValueError("individuals must not be empty")
        return ranked[0]
