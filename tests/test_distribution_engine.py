from __future__ import annotations

import random
import unittest
from collections import Counter

from rumbleparty.distribution import (
    DEFAULT_MODE,
    TOTAL_NUMBERS,
    DistributionMode,
    DistributionResult,
    InvalidInputError,
    distribute_numbers,
)
from rumbleparty.distribution.tiers import chunk_into_tiers, shared_group_sizes

ALL_MODES = tuple(DistributionMode)
FULL_RANGE = list(range(1, TOTAL_NUMBERS + 1))


def _ids(count: int) -> list[str]:
    return [f"participant-{i:02d}" for i in range(count)]


def _covered_numbers(result: DistributionResult) -> list[int]:
    return sorted(result.owned_numbers() + list(result.shared) + result.unassigned)


class DistributionPropertyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rng = random.Random(20250125)

    def test_every_number_is_placed_exactly_once(self) -> None:
        for count in range(1, TOTAL_NUMBERS + 1):
            for mode in ALL_MODES:
                with self.subTest(count=count, mode=mode):
                    result = distribute_numbers(_ids(count), mode, rng=self.rng)
                    self.assertEqual(_covered_numbers(result), FULL_RANGE)

    def test_owned_numbers_are_exclusive(self) -> None:
        for count in range(1, TOTAL_NUMBERS + 1):
            for mode in ALL_MODES:
                with self.subTest(count=count, mode=mode):
                    result = distribute_numbers(_ids(count), mode, rng=self.rng)
                    owned = result.owned_numbers()
                    self.assertEqual(len(owned), len(set(owned)))

    def test_every_participant_gets_a_fair_share(self) -> None:
        for count in range(1, TOTAL_NUMBERS + 1):
            per_participant, remainder = divmod(TOTAL_NUMBERS, count)
            for mode in ALL_MODES:
                with self.subTest(count=count, mode=mode):
                    ids = _ids(count)
                    result = distribute_numbers(ids, mode, rng=self.rng)
                    self.assertEqual(set(result.owned), set(ids))
                    for pid in ids:
                        self.assertEqual(len(result.owned[pid]), per_participant)
                        self.assertEqual(result.owned[pid], sorted(result.owned[pid]))
                        groups = result.shared_groups_for(pid)
                        if mode is DistributionMode.SHARED and remainder:
                            self.assertEqual(len(groups), 1)
                        else:
                            self.assertEqual(groups, [])

    def test_each_participant_takes_one_number_per_tier(self) -> None:
        for count in range(1, TOTAL_NUMBERS + 1):
            for mode in ALL_MODES:
                with self.subTest(count=count, mode=mode):
                    result = distribute_numbers(_ids(count), mode, rng=self.rng)
                    tiers = chunk_into_tiers(result.owned_numbers(), count)
                    for numbers in result.owned.values():
                        for tier in tiers:
                            self.assertEqual(len(set(numbers) & set(tier)), 1)

    def test_unassigned_count_matches_remainder(self) -> None:
        for count in range(1, TOTAL_NUMBERS + 1):
            remainder = TOTAL_NUMBERS % count
            for mode in ALL_MODES:
                with self.subTest(count=count, mode=mode):
                    result = distribute_numbers(_ids(count), mode, rng=self.rng)
                    if mode is DistributionMode.SHARED:
                        self.assertEqual(result.unassigned, [])
                        self.assertEqual(len(result.shared), remainder)
                    else:
                        self.assertEqual(len(result.unassigned), remainder)
                        self.assertEqual(result.unassigned, sorted(result.unassigned))
                        self.assertEqual(result.shared, {})

    def test_shared_groups_cover_everyone_evenly(self) -> None:
        for count in range(1, TOTAL_NUMBERS + 1):
            if TOTAL_NUMBERS % count == 0:
                continue
            with self.subTest(count=count):
                ids = _ids(count)
                result = distribute_numbers(ids, DistributionMode.SHARED, rng=self.rng)
                sizes = [len(members) for members in result.shared.values()]
                self.assertEqual(sum(sizes), count)
                self.assertGreaterEqual(min(sizes), 1)
                self.assertLessEqual(max(sizes) - min(sizes), 1)
                members = [pid for group in result.shared.values() for pid in group]
                self.assertEqual(sorted(members), sorted(ids))


class DistributionScenarioTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rng = random.Random(1988)

    def test_six_participants_divide_evenly(self) -> None:
        result = distribute_numbers(_ids(6), DistributionMode.EXCLUDE, rng=self.rng)
        self.assertTrue(all(len(nums) == 5 for nums in result.owned.values()))
        self.assertEqual(result.unassigned, [])

    def test_seven_participants_exclude_two_numbers(self) -> None:
        result = distribute_numbers(_ids(7), DistributionMode.EXCLUDE, rng=self.rng)
        self.assertTrue(all(len(nums) == 4 for nums in result.owned.values()))
        self.assertEqual(len(result.owned_numbers()), 28)
        self.assertEqual(len(result.unassigned), 2)

    def test_buy_extra_leaves_the_same_leftovers_as_exclude(self) -> None:
        result = distribute_numbers(_ids(7), DistributionMode.BUY_EXTRA, rng=self.rng)
        self.assertEqual(result.mode, DistributionMode.BUY_EXTRA)
        self.assertEqual(len(result.unassigned), 2)
        self.assertEqual(result.shared, {})

    def test_seven_participants_share_two_numbers(self) -> None:
        result = distribute_numbers(_ids(7), DistributionMode.SHARED, rng=self.rng)
        self.assertEqual(len(result.owned_numbers()), 28)
        self.assertEqual(len(result.shared), 2)
        self.assertEqual(sorted(len(g) for g in result.shared.values()), [3, 4])

    def test_single_participant_owns_everything(self) -> None:
        for mode in ALL_MODES:
            with self.subTest(mode=mode):
                result = distribute_numbers(["solo"], mode, rng=self.rng)
                self.assertEqual(result.owned, {"solo": FULL_RANGE})
                self.assertEqual(result.unassigned, [])
                self.assertEqual(result.shared, {})

    def test_thirty_participants_get_one_number_each(self) -> None:
        for mode in ALL_MODES:
            with self.subTest(mode=mode):
                result = distribute_numbers(_ids(30), mode, rng=self.rng)
                self.assertTrue(all(len(nums) == 1 for nums in result.owned.values()))
                self.assertEqual(result.unassigned, [])
                self.assertEqual(result.shared, {})

    def test_numbers_for_merges_owned_and_shared(self) -> None:
        ids = _ids(4)
        result = distribute_numbers(ids, DistributionMode.SHARED, rng=self.rng)
        for pid in ids:
            expected = sorted(result.owned[pid] + result.shared_groups_for(pid))
            self.assertEqual(result.numbers_for(pid), expected)
            self.assertEqual(len(result.numbers_for(pid)), 8)


class DistributionInputTests(unittest.TestCase):
    def test_empty_participant_list_raises(self) -> None:
        for mode in ALL_MODES:
            with self.subTest(mode=mode):
                with self.assertRaises(InvalidInputError):
                    distribute_numbers([], mode)

    def test_too_many_participants_raises(self) -> None:
        for mode in ALL_MODES:
            with self.subTest(mode=mode):
                with self.assertRaises(InvalidInputError):
                    distribute_numbers(_ids(31), mode)

    def test_invalid_input_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            distribute_numbers([])

    def test_unknown_mode_raises(self) -> None:
        with self.assertRaises(InvalidInputError):
            distribute_numbers(_ids(3), "EVERYONE_WINS")

    def test_mode_defaults_to_exclude(self) -> None:
        self.assertEqual(DEFAULT_MODE, DistributionMode.EXCLUDE)
        self.assertEqual(distribute_numbers(_ids(7)).mode, DistributionMode.EXCLUDE)
        self.assertEqual(distribute_numbers(_ids(7), None).mode, DistributionMode.EXCLUDE)

    def test_mode_accepts_string_values(self) -> None:
        result = distribute_numbers(_ids(7), "shared")
        self.assertIs(result.mode, DistributionMode.SHARED)

    def test_input_sequence_is_not_mutated(self) -> None:
        ids = _ids(9)
        snapshot = list(ids)
        distribute_numbers(ids, DistributionMode.SHARED)
        self.assertEqual(ids, snapshot)

    def test_accepts_tuples(self) -> None:
        result = distribute_numbers(tuple(_ids(3)))
        self.assertEqual(len(result.owned), 3)


class DistributionRandomnessTests(unittest.TestCase):
    def test_seeded_generators_reproduce_results(self) -> None:
        ids = _ids(7)
        for mode in ALL_MODES:
            with self.subTest(mode=mode):
                first = distribute_numbers(ids, mode, rng=random.Random(42))
                second = distribute_numbers(ids, mode, rng=random.Random(42))
                self.assertEqual(first, second)

    def test_unseeded_calls_vary(self) -> None:
        ids = _ids(5)
        outcomes = {
            tuple(tuple(distribute_numbers(ids).owned[pid]) for pid in ids)
            for _ in range(20)
        }
        self.assertGreater(len(outcomes), 1)

    def test_last_entrant_owner_is_uniform(self) -> None:
        # Chi-squared goodness of fit, df=4, critical value at p=0.001.
        critical_value = 18.467
        rng = random.Random(30)
        ids = _ids(5)
        trials = 3000
        owners: Counter[str] = Counter()
        for _ in range(trials):
            result = distribute_numbers(ids, rng=rng)
            owner = next(pid for pid, nums in result.owned.items() if 30 in nums)
            owners[owner] += 1

        expected = trials / len(ids)
        statistic = sum((owners[pid] - expected) ** 2 / expected for pid in ids)
        self.assertLess(statistic, critical_value)

    def test_leftovers_are_drawn_from_the_whole_range(self) -> None:
        rng = random.Random(7)
        seen: set[int] = set()
        for _ in range(300):
            seen.update(distribute_numbers(_ids(7), rng=rng).unassigned)
        self.assertEqual(seen, set(FULL_RANGE))


class TierHelperTests(unittest.TestCase):
    def test_chunk_into_tiers_sorts_and_keeps_short_tail(self) -> None:
        tiers = chunk_into_tiers([5, 1, 4, 2, 3], 2)
        self.assertEqual(tiers, [[1, 2], [3, 4], [5]])

    def test_chunk_into_tiers_rejects_non_positive_size(self) -> None:
        with self.assertRaises(ValueError):
            chunk_into_tiers([1, 2], 0)

    def test_shared_group_sizes(self) -> None:
        self.assertEqual(shared_group_sizes(7, 3), [3, 2, 2])
        self.assertEqual(shared_group_sizes(7, 2), [4, 3])
        self.assertEqual(shared_group_sizes(29, 1), [29])
        self.assertEqual(shared_group_sizes(8, 6), [2, 2, 1, 1, 1, 1])
        self.assertEqual(shared_group_sizes(5, 0), [])


if __name__ == "__main__":
    unittest.main()
