# tests/test_win_evaluation.py
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelpay.domain.machine.entities.grid import SymbolGrid
from reelpay.domain.machine.entities.payline import PaylinePattern
from reelpay.domain.machine.entities.symbol import SymbolEntry, WinMode, PayScaling
from reelpay.domain.machine.entities.win_record import WinSource, MAX_WIN_VALUE
from reelpay.domain.machine.services.win_evaluation import WinEvaluator, evaluate_wins


A = SymbolEntry("A", base_value=2, min_win_depth=3)
B = SymbolEntry("B", base_value=4, min_win_depth=4)
C = SymbolEntry("C", base_value=1, min_win_depth=1)
D = SymbolEntry("D", base_value=5, min_win_depth=3)
X = SymbolEntry("X", base_value=1, min_win_depth=3)
W = SymbolEntry("W", is_wild=True)


def single_row(symbols):
    """Cells, column count and row counts for a one-row grid."""
    return list(symbols), len(symbols), [1] * len(symbols)


def straight(column_count, row=0):
    return [row * column_count + c for c in range(column_count)]


class TestLinePass(unittest.TestCase):
    """Line wins on straight and jagged grids."""

    def setUp(self):
        self.evaluator = WinEvaluator()

    def evaluate_row(self, symbols, credit_cost=1):
        cells, columns, rows = single_row(symbols)
        return self.evaluator.evaluate_grid(cells, columns, rows, [straight(columns)], credit_cost)

    def test_five_of_a_kind(self):
        wins = self.evaluate_row([A] * 5)

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].value, 8)
        self.assertEqual(wins[0].cells, (0, 1, 2, 3, 4))
        self.assertEqual(wins[0].line_index, 0)
        self.assertEqual(wins[0].source, WinSource.LINE)
        self.assertEqual(wins[0].symbol_name, "A")

    def test_exact_minimum_depth_pays_base(self):
        wins = self.evaluate_row([A, A, A, X, X])
        self.assertEqual([w.value for w in wins], [2])

    def test_below_minimum_depth_does_not_pay(self):
        self.assertEqual(self.evaluate_row([A, A, X, A, A]), [])

    def test_leading_wilds_hand_off_to_first_paying_symbol(self):
        wins = self.evaluate_row([W, W, A])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].value, 2)
        self.assertEqual(wins[0].symbol_name, "A")
        self.assertEqual(wins[0].cells, (0, 1, 2))

    def test_wilds_substitute_on_both_sides(self):
        self.assertEqual([w.value for w in self.evaluate_row([W, W, W, B])], [4])
        self.assertEqual([w.value for w in self.evaluate_row([W, B, B, W])], [4])

    def test_all_wilds_never_pay(self):
        self.assertEqual(self.evaluate_row([W] * 5), [])

    def test_wild_that_can_trigger_keeps_the_line(self):
        paying_wild = SymbolEntry("PW", base_value=3, min_win_depth=3, is_wild=True)
        wins = self.evaluate_row([paying_wild, A, A])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].symbol_name, "PW")
        self.assertEqual(wins[0].value, 3)

    def test_symbol_refusing_wilds_breaks_on_wild(self):
        proud = SymbolEntry("P", base_value=2, min_win_depth=2, allow_wild_match=False)
        self.assertEqual(self.evaluate_row([W, proud, proud]), [])
        self.assertEqual([w.value for w in self.evaluate_row([proud, proud, W])], [2])

    def test_non_wild_non_trigger_leftmost_skips_line(self):
        coin = SymbolEntry("coin", base_value=1, win_mode=WinMode.SINGLE_ON_REEL)
        wins = self.evaluate_row([coin, A, A, A])

        self.assertTrue(all(w.source == WinSource.SYMBOL_GROUP for w in wins))

    def test_zero_base_trigger_skips_line(self):
        blank = SymbolEntry("blank", base_value=0, min_win_depth=1)
        self.assertEqual(self.evaluate_row([blank] * 5), [])

    def test_match_group_members_match_each_other(self):
        ruby = SymbolEntry("ruby", base_value=3, min_win_depth=3, match_group_id=1)
        ruby_big = SymbolEntry("ruby_big", base_value=9, min_win_depth=5, match_group_id=1)
        wins = self.evaluate_row([ruby, ruby_big, ruby])

        self.assertEqual([w.value for w in wins], [3])

    def test_ten_matches_doubles_per_extra_symbol(self):
        self.assertEqual([w.value for w in self.evaluate_row([A] * 10)], [256])

    def test_single_column_pattern(self):
        wins = self.evaluator.evaluate_grid([A] * 5, 1, [5], [[0, 1, 2, 3, 4]])
        self.assertEqual([w.value for w in wins], [8])

    def test_seven_columns_on_jagged_rows(self):
        rows = [3, 4, 5, 6, 5, 4, 3]
        cells = [A] * (max(rows) * len(rows))
        wins = self.evaluator.evaluate_grid(cells, len(rows), rows, [straight(len(rows))])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].value, 32)

    def test_wild_trigger_across_varied_heights(self):
        rows = [3, 4, 5, 5, 4, 3]
        grid = SymbolGrid.from_columns([[W, X, X]] + [[D] * r for r in rows[1:]])
        wins = self.evaluator.evaluate_wins(grid, [straight(len(rows))])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].value, 40)
        self.assertEqual(wins[0].symbol_name, "D")

    def test_truncated_column_stops_the_walk(self):
        # Pattern walks row 1; the last column only has one row
        cells = [C] * 9
        wins = self.evaluator.evaluate_grid(cells, 3, [2, 3, 1], [[3, 4, 5]])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].cells, (3, 4))
        self.assertEqual(wins[0].value, 2)

    def test_zero_row_column_voids_the_line(self):
        grid = SymbolGrid.from_columns([[W], [], [C], [C], [C]])
        wins = self.evaluator.evaluate_wins(grid, [straight(5)])

        self.assertEqual(wins, [])

    def test_zero_row_column_voids_even_a_depth_one_trigger(self):
        grid = SymbolGrid.from_columns([[C], [], [C]])
        self.assertEqual(self.evaluator.evaluate_wins(grid, [[0, 1, 2]]), [])

    def test_overlapping_lines_both_pay(self):
        cells = [A] * 6
        wins = self.evaluator.evaluate_grid(cells, 3, [2, 2, 2], [[0, 1, 2], [0, 4, 2]])

        self.assertEqual([w.value for w in wins], [2, 2])
        self.assertEqual([w.line_index for w in wins], [0, 1])

    def test_multiplier_and_credit_cost_scale_the_value(self):
        cells, columns, rows = single_row([A] * 5)
        pattern = PaylinePattern(tuple(straight(columns)), win_multiplier=3)
        wins = self.evaluator.evaluate_grid(cells, columns, rows, [pattern], credit_cost=2)

        self.assertEqual(wins[0].value, 48)

    def test_zero_credit_cost_pays_nothing(self):
        wins = self.evaluate_row([A] * 5, credit_cost=0)
        self.assertTrue(all(w.value == 0 for w in wins))

    def test_values_saturate(self):
        huge = SymbolEntry("H", base_value=2 ** 30, min_win_depth=1)
        wins = self.evaluate_row([huge] * 5)

        self.assertEqual(wins[0].value, MAX_WIN_VALUE)

    def test_negative_credit_cost_raises(self):
        cells, columns, rows = single_row([A] * 3)
        with self.assertRaises(ValueError):
            self.evaluator.evaluate_grid(cells, columns, rows, [straight(columns)], credit_cost=-1)

    def test_faulty_pattern_is_logged_and_skipped(self):
        cells, columns, rows = single_row([A] * 3)
        with self.assertLogs("domain.machine.win_evaluator", level="ERROR"):
            wins = self.evaluator.evaluate_grid(cells, columns, rows, [["bad"], [0, 1, 2]])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].line_index, 1)

    def test_none_patterns_run_only_group_pass(self):
        coin = SymbolEntry("coin", base_value=1, win_mode=WinMode.SINGLE_ON_REEL)
        wins = self.evaluator.evaluate_grid([A, coin, A], 3, [1, 1, 1], None)

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].source, WinSource.SYMBOL_GROUP)

    def test_empty_cells_never_match(self):
        self.assertEqual(self.evaluate_row([A, None, A, A]), [])

    def test_module_shortcut(self):
        cells, columns, rows = single_row([A] * 5)
        self.assertEqual([w.value for w in evaluate_wins(cells, columns, rows, [straight(columns)])], [8])


class TestPayScaling(unittest.TestCase):
    """Per-symbol and depth-squared payouts for lines and groups."""

    def setUp(self):
        self.evaluator = WinEvaluator()

    def test_line_per_symbol(self):
        s = SymbolEntry("A", base_value=10, min_win_depth=1, match_group_id=1,
                        pay_scaling=PayScaling.PER_SYMBOL)
        wins = self.evaluator.evaluate_grid([s] * 3, 3, [1, 1, 1], [[0, 1, 2]])
        self.assertEqual(wins[0].value, 30)

    def test_line_depth_squared(self):
        s = SymbolEntry("A", base_value=10, min_win_depth=1, match_group_id=1)
        wins = self.evaluator.evaluate_grid([s] * 3, 3, [1, 1, 1], [[0, 1, 2]])
        self.assertEqual(wins[0].value, 40)

    def test_line_per_symbol_counts_matches_across_the_whole_pattern(self):
        s = SymbolEntry("S", base_value=1, min_win_depth=2, pay_scaling=PayScaling.PER_SYMBOL)
        wins = self.evaluator.evaluate_grid([s, s, X, s], 4, [1] * 4, [[0, 1, 2, 3]])

        self.assertEqual(wins[0].value, 3)
        self.assertEqual(wins[0].cells, (0, 1))

    def test_per_symbol_counts_past_a_gap(self):
        a = SymbolEntry("A", base_value=10, min_win_depth=1, pay_scaling=PayScaling.PER_SYMBOL)
        filler = SymbolEntry("B", base_value=1, min_win_depth=3)
        wins = self.evaluator.evaluate_grid([a, filler, a], 3, [1, 1, 1], [[0, 1, 2]])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].cells, (0,))
        self.assertEqual(wins[0].value, 20)

    def test_depth_squared_doubles_per_extra_match(self):
        previous = None
        for depth in range(3, 9):
            cells = [A] * depth + [X]
            wins = self.evaluator.evaluate_grid(cells, len(cells), [1] * len(cells), [straight(len(cells))])
            if previous is not None:
                self.assertEqual(wins[0].value, previous * 2)
            previous = wins[0].value

    def test_total_count_per_symbol(self):
        t = SymbolEntry("T", base_value=5, win_mode=WinMode.TOTAL_COUNT, total_count_trigger=2,
                        match_group_id=7, pay_scaling=PayScaling.PER_SYMBOL)
        wins = self.evaluator.evaluate_grid([t] * 3, 3, [1, 1, 1], [[0, 1, 2]])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].value, 15)
        self.assertEqual(wins[0].source, WinSource.SYMBOL_GROUP)
        self.assertIsNone(wins[0].line_index)

    def test_total_count_depth_squared(self):
        t = SymbolEntry("T", base_value=5, win_mode=WinMode.TOTAL_COUNT, total_count_trigger=2,
                        match_group_id=7)
        wins = self.evaluator.evaluate_grid([t] * 3, 3, [1, 1, 1], [[0, 1, 2]])
        self.assertEqual(wins[0].value, 10)


class TestSymbolGroupPass(unittest.TestCase):
    """Grid-wide SingleOnReel and TotalCount wins."""

    def setUp(self):
        self.evaluator = WinEvaluator()
        self.coin = SymbolEntry("coin", base_value=1, win_mode=WinMode.SINGLE_ON_REEL)
        self.star = SymbolEntry("star", base_value=5, win_mode=WinMode.TOTAL_COUNT,
                                total_count_trigger=3, match_group_id=10)
        self.moon = SymbolEntry("moon", base_value=50, win_mode=WinMode.TOTAL_COUNT,
                                total_count_trigger=3, match_group_id=10)

    def test_single_on_reel_pays_each_cell(self):
        wins = self.evaluator.evaluate_grid([self.coin, X, self.coin], 3, [1, 1, 1], [], credit_cost=2)

        self.assertEqual([(w.cells, w.value) for w in wins], [((0,), 2), ((2,), 2)])

    def test_group_wins_follow_line_wins(self):
        cells = [A, A, A, self.coin]
        wins = self.evaluator.evaluate_grid(cells, 4, [1] * 4, [[0, 1, 2, 3]])

        self.assertEqual([w.source for w in wins], [WinSource.LINE, WinSource.SYMBOL_GROUP])

    def test_total_count_counted_once_per_group(self):
        cells = [self.star, self.moon, X, self.star]
        wins = self.evaluator.evaluate_grid(cells, 4, [1] * 4, [])

        self.assertEqual(len(wins), 1)
        # The first group member in grid order governs the payout
        self.assertEqual(wins[0].symbol_name, "star")
        self.assertEqual(wins[0].cells, (0, 1, 3))
        self.assertEqual(wins[0].value, 5)

    def test_total_count_one_record_for_the_whole_group(self):
        nine = SymbolEntry("nine", base_value=2, win_mode=WinMode.TOTAL_COUNT,
                           total_count_trigger=3, match_group_id=9)
        wins = self.evaluator.evaluate_grid([nine] * 3, 3, [1, 1, 1], [[0, 1, 2]])

        self.assertEqual(len(wins), 1)
        self.assertEqual(wins[0].cells, (0, 1, 2))

    def test_wild_total_count_symbols_never_self_award(self):
        wild = SymbolEntry("wild", is_wild=True, base_value=5, win_mode=WinMode.TOTAL_COUNT,
                           total_count_trigger=1, match_group_id=2)
        wins = self.evaluator.evaluate_grid([wild] * 6, 3, [2, 2, 2], [[0, 1, 2], [3, 4, 5]])
        self.assertEqual(wins, [])

    def test_total_count_below_trigger(self):
        wins = self.evaluator.evaluate_grid([self.star, X, self.star], 3, [1, 1, 1], [])
        self.assertEqual(wins, [])

    def test_total_count_ignores_wilds(self):
        wild_star = SymbolEntry("wild_star", is_wild=True, match_group_id=10)
        wins = self.evaluator.evaluate_grid([self.star, wild_star, self.star], 3, [1, 1, 1], [])
        self.assertEqual(wins, [])

    def test_total_count_without_trigger_never_pays(self):
        broken = SymbolEntry("broken", base_value=5, win_mode=WinMode.TOTAL_COUNT, match_group_id=3)
        self.assertEqual(self.evaluator.evaluate_grid([broken] * 4, 4, [1] * 4, []), [])

    def test_truncated_cells_are_not_counted(self):
        # Column 1 has one row, so the star stored at row 1 is not on the grid
        cells = [self.star, self.star, X, self.star]
        wins = self.evaluator.evaluate_grid(cells, 2, [2, 1], [])
        self.assertEqual(wins, [])


if __name__ == '__main__':
    unittest.main()
