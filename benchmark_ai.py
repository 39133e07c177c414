#!/usr/bin/env python3
"""
AI Snake Benchmarking Tool

This script pits the AI snake against a scripted player in headless games.
It runs multiple games and generates a comprehensive report.

Usage:
    python benchmark_ai.py [--iterations N] [--workers N] [--difficulty D] [--opponent NAME]

The script will:
1. Run N seeded games (default 500) across worker processes
2. Collect win rates, scores and death causes
3. Generate detailed statistics and a report
4. Save results to benchmarks/ directory
"""

import argparse
import json
import sys
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional

import sympy
from tqdm import tqdm

from snake_ai.ai_snake import DIFFICULTY_SETTINGS, MEDIUM
from snake_ai.game import AI, DRAW, PLAYER, Game, GameConfig
from snake_ai.opponents import OPPONENTS

PROJECT_ROOT = Path(__file__).parent


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs"""
    iterations: int = 500
    workers: int = 8
    width: int = 40
    height: int = 30
    difficulty: str = MEDIUM
    opponent: str = "greedy"
    max_ticks: int = 2000
    bonus_food_chance: float = 0.0
    super_food_chance: float = 0.0
    output_root: Optional[Path] = None


@dataclass
class GameResult:
    """Result of a single game"""
    game_num: int
    winner: Optional[str]  # "ai", "player", "draw", or None for error
    seed: int = 0
    ticks: int = 0
    ai_score: int = 0
    player_score: int = 0
    ai_length: int = 0
    player_length: int = 0
    death_reason_ai: str = ""
    death_reason_player: str = ""
    error: str = ""


@dataclass
class BenchmarkStats:
    """Aggregated benchmark statistics"""
    total_games: int = 0
    ai_wins: int = 0
    player_wins: int = 0
    draws: int = 0
    errors: int = 0

    total_ticks: int = 0
    ai_total_score: int = 0
    player_total_score: int = 0

    ai_death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    player_death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    game_results: List[GameResult] = field(default_factory=list)

    @property
    def valid_games(self) -> int:
        return self.total_games - self.errors

    @property
    def ai_win_rate(self) -> float:
        return self.ai_wins / self.valid_games * 100 if self.valid_games > 0 else 0

    @property
    def player_win_rate(self) -> float:
        return self.player_wins / self.valid_games * 100 if self.valid_games > 0 else 0

    @property
    def draw_rate(self) -> float:
        return self.draws / self.valid_games * 100 if self.valid_games > 0 else 0

    @property
    def avg_ticks(self) -> float:
        return self.total_ticks / self.valid_games if self.valid_games > 0 else 0

    @property
    def avg_ai_score(self) -> float:
        return self.ai_total_score / self.valid_games if self.valid_games > 0 else 0

    @property
    def avg_player_score(self) -> float:
        return self.player_total_score / self.valid_games if self.valid_games > 0 else 0

    def record(self, result: GameResult):
        """Fold one game result into the totals."""
        self.total_games += 1
        self.game_results.append(result)

        if result.error and result.winner is None:
            self.errors += 1
            return
        elif result.winner == AI:
            self.ai_wins += 1
        elif result.winner == PLAYER:
            self.player_wins += 1
        elif result.winner == DRAW:
            self.draws += 1

        self.total_ticks += result.ticks
        self.ai_total_score += result.ai_score
        self.player_total_score += result.player_score

        if result.death_reason_ai:
            self.ai_death_reasons[result.death_reason_ai] += 1
        if result.death_reason_player:
            self.player_death_reasons[result.death_reason_player] += 1


def generate_seeds(count: int, start: int = 100) -> List[int]:
    """Successive primes above *start*, one per game."""
    seeds = []
    last_prime = start
    for _ in range(count):
        last_prime = int(sympy.nextprime(last_prime))
        seeds.append(last_prime)
    return seeds


def run_single_game(game_num: int, seed: int, config: BenchmarkConfig) -> GameResult:
    """Run a single game and return the result"""
    result = GameResult(game_num=game_num, winner=None, seed=seed)

    game_config = GameConfig(
        width=config.width,
        height=config.height,
        difficulty=config.difficulty,
        max_ticks=config.max_ticks,
        bonus_food_chance=config.bonus_food_chance,
        super_food_chance=config.super_food_chance,
    )

    try:
        game = Game(game_config, player_controller=OPPONENTS[config.opponent], seed=seed)
        outcome = game.run()
    except Exception as e:
        result.error = str(e)
        return result

    result.winner = outcome["winner"]
    result.ticks = outcome["ticks"]
    result.ai_score = outcome["ai_score"]
    result.player_score = outcome["player_score"]
    result.ai_length = outcome["ai_length"]
    result.player_length = outcome["player_length"]
    result.death_reason_ai = outcome["death_reasons"].get(AI, "")
    result.death_reason_player = outcome["death_reasons"].get(PLAYER, "")
    return result


class BenchmarkRunner:
    """Main benchmark runner"""

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.stats = BenchmarkStats()
        self.stats_lock = Lock()

        # Create output directory
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_root = config.output_root or PROJECT_ROOT / "benchmarks"
        self.output_dir = Path(output_root) / f"benchmark_{timestamp}"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def run(self) -> BenchmarkStats:
        """Run all benchmark games"""
        print("=" * 70)
        print("     AI SNAKE BENCHMARK")
        print(f"     AI ({self.config.difficulty}) vs {self.config.opponent} player")
        print(f"     Running {self.config.iterations} games with {self.config.workers} workers")
        print(f"     Board: {self.config.width}x{self.config.height}")
        print("=" * 70)
        print()

        seeds = generate_seeds(self.config.iterations)

        # Run games in parallel
        with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
            futures = {
                executor.submit(run_single_game, game_num, seed, self.config): game_num
                for game_num, seed in enumerate(seeds)
            }

            bar_fmt = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}] {postfix}"
            with tqdm(total=self.config.iterations, desc="Running games", bar_format=bar_fmt) as pbar:
                for future in as_completed(futures):
                    result = future.result()

                    with self.stats_lock:
                        self.stats.record(result)

                    pbar.set_postfix({
                        "AI": self.stats.ai_wins,
                        "Player": self.stats.player_wins,
                        "Draw": self.stats.draws,
                    })
                    pbar.update(1)

        return self.stats

    def generate_report(self) -> str:
        """Generate a comprehensive benchmark report"""
        s = self.stats

        report = []
        report.append("\n" + "=" * 70)
        report.append("                    BENCHMARK REPORT")
        report.append("=" * 70)

        # Overall results
        report.append("\n📊 OVERALL RESULTS")
        report.append("-" * 40)
        report.append(f"   Total Games:     {s.total_games}")
        report.append(f"   Valid Games:     {s.valid_games}")
        report.append(f"   Errors:          {s.errors}")
        report.append("")

        # Win rates
        report.append("🏆 WIN RATES")
        report.append("-" * 40)
        report.append(f"   AI ({self.config.difficulty}):     {s.ai_wins:4d} wins ({s.ai_win_rate:5.1f}%)")
        report.append(f"   Player ({self.config.opponent}): {s.player_wins:4d} wins ({s.player_win_rate:5.1f}%)")
        report.append(f"   Draws:           {s.draws:4d}      ({s.draw_rate:5.1f}%)")
        report.append("")

        # Performance stats
        report.append("📈 PERFORMANCE STATISTICS")
        report.append("-" * 40)
        report.append(f"   Average Game Length:    {s.avg_ticks:.1f} ticks")
        report.append(f"   Avg AI Score:           {s.avg_ai_score:.1f}")
        report.append(f"   Avg Player Score:       {s.avg_player_score:.1f}")
        report.append("")

        for label, reasons in (("AI", s.ai_death_reasons), ("PLAYER", s.player_death_reasons)):
            if not reasons:
                continue
            report.append(f"💀 {label} DEATH REASONS")
            report.append("-" * 40)
            for reason, count in sorted(reasons.items(), key=lambda x: -x[1]):
                pct = count / s.valid_games * 100 if s.valid_games > 0 else 0
                report.append(f"   {reason:30s} {count:4d} ({pct:5.1f}%)")
            report.append("")

        # Statistical significance
        if s.valid_games >= 30:
            # Simple binomial confidence interval approximation
            p_ai = s.ai_wins / s.valid_games
            se = (p_ai * (1 - p_ai) / s.valid_games) ** 0.5
            ci_low = max(0, p_ai - 1.96 * se)
            ci_high = min(1, p_ai + 1.96 * se)

            report.append("📉 STATISTICAL ANALYSIS")
            report.append("-" * 40)
            report.append(f"   AI Win Rate: {p_ai*100:.1f}%")
            report.append(f"   95% Confidence Interval: [{ci_low*100:.1f}%, {ci_high*100:.1f}%]")

            if ci_low > 0.5:
                report.append("   ✅ AI wins SIGNIFICANTLY more often (p < 0.05)")
            elif ci_high < 0.5:
                report.append("   ❌ AI wins SIGNIFICANTLY less often (p < 0.05)")
            else:
                report.append("   ⚖️  No statistically significant difference")
            report.append("")

        report.append("=" * 70)
        report.append(f"   Results saved to: {self.output_dir}")
        report.append("=" * 70)

        return "\n".join(report)

    def save_results(self):
        """Save benchmark results to files"""
        summary = {
            "config": {
                "iterations": self.config.iterations,
                "workers": self.config.workers,
                "width": self.config.width,
                "height": self.config.height,
                "difficulty": self.config.difficulty,
                "opponent": self.config.opponent,
                "max_ticks": self.config.max_ticks,
            },
            "results": {
                "total_games": self.stats.total_games,
                "ai_wins": self.stats.ai_wins,
                "player_wins": self.stats.player_wins,
                "draws": self.stats.draws,
                "errors": self.stats.errors,
                "ai_win_rate": self.stats.ai_win_rate,
                "player_win_rate": self.stats.player_win_rate,
                "avg_ticks": self.stats.avg_ticks,
                "avg_ai_score": self.stats.avg_ai_score,
                "avg_player_score": self.stats.avg_player_score,
            },
            "death_reasons": {
                "ai": dict(self.stats.ai_death_reasons),
                "player": dict(self.stats.player_death_reasons),
            },
            "timestamp": datetime.now().isoformat(),
        }

        with open(self.output_dir / "summary.json", "w") as f:
            json.dump(summary, f, indent=2)

        report = self.generate_report()
        with open(self.output_dir / "report.txt", "w", encoding="utf-8") as f:
            f.write(report)

        print(report)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Benchmark the AI snake against a scripted player",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python benchmark_ai.py                         # Run 500 games with 8 workers
    python benchmark_ai.py --iterations 100        # Quick test with 100 games
    python benchmark_ai.py --difficulty hard       # Fastest path refresh
    python benchmark_ai.py --opponent idle         # Player never steers
        """
    )
    parser.add_argument(
        "--iterations", "-n",
        type=int,
        default=500,
        help="Number of games to run (default: 500)"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=8,
        help="Number of parallel workers (default: 8)"
    )
    parser.add_argument(
        "--difficulty", "-d",
        choices=list(DIFFICULTY_SETTINGS),
        default=MEDIUM,
        help="AI difficulty (default: medium)"
    )
    parser.add_argument(
        "--opponent", "-o",
        choices=list(OPPONENTS),
        default="greedy",
        help="Scripted player controller (default: greedy)"
    )
    parser.add_argument(
        "--width",
        type=int,
        default=40,
        help="Board width (default: 40)"
    )
    parser.add_argument(
        "--height",
        type=int,
        default=30,
        help="Board height (default: 30)"
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=2000,
        help="Tick cap per game; the higher score wins at the cap (default: 2000)"
    )

    args = parser.parse_args(argv)

    config = BenchmarkConfig(
        iterations=args.iterations,
        workers=args.workers,
        width=args.width,
        height=args.height,
        difficulty=args.difficulty,
        opponent=args.opponent,
        max_ticks=args.max_ticks,
    )

    try:
        runner = BenchmarkRunner(config)
    except OSError as e:
        print(f"❌ Could not create output directory: {e}")
        sys.exit(1)

    runner.run()
    runner.save_results()


if __name__ == "__main__":
    main()
