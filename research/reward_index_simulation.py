import logging
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from dataclasses import dataclass, field
from fractions import Fraction
from typing import List, Optional
from pathlib import Path
from datetime import datetime

from reward_model.src.constants import DECIMAL_FRACTIONAL
from reward_model.src.host import TaxParams
from reward_model.src.ledger import Ledger
from reward_model.src.fixed_point import FixedDecimal
from reward_model.src.msgs import Coin, InstantiateMsg, StateQuery, TriggerSwap, UpdateGlobalIndex
from reward_model.src.state.reward_state import State, store_state

log = logging.getLogger(__name__)

REWARD_CONTRACT = "reward_contract"
HUB_CONTRACT = "hub_contract"
FEE_ADDRESS = "lido_fee_collector"
OWNER = "gov_owner"
FOREIGN_DENOM = "ukrw"

@dataclass
class TaxSettings:
    rate: str = "0.001"      # 0.1% transfer tax
    cap: int = 1_000_000     # 1 uusd

@dataclass
class SimulationParams:
    bonded_principal: int = 1_000_000_000_007  # ~1M units with 6 decimals, not a divisor of 1e18
    apr: float = 0.08
    reward_volatility: float = 0.2   # relative std of per-epoch rewards
    foreign_share: float = 0.3       # fraction of rewards paid in FOREIGN_DENOM
    foreign_rate: str = "0.00085"    # uusd per ukrw
    lido_fee_rate: str = "0.10"
    simulation_days: int = 365
    epochs_per_day: int = 4
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    tax: TaxSettings = field(default_factory=TaxSettings)

class RewardIndexSimulation:
    """Drives the hub cycle (rewards arrive -> swap -> update index) against the ledger"""

    def __init__(self, params: SimulationParams):
        self.params = params
        self.ledger = Ledger(TaxParams(
            rate=FixedDecimal.from_str(params.tax.rate),
            cap=params.tax.cap,
        ))
        self.ledger.bank.set_rate(FOREIGN_DENOM, "uusd", FixedDecimal.from_str(params.foreign_rate))
        self.ledger.instantiate(REWARD_CONTRACT, OWNER, InstantiateMsg(
            hub_contract=HUB_CONTRACT,
            reward_denom="uusd",
            lido_fee_rate=FixedDecimal.from_str(params.lido_fee_rate),
            lido_fee_address=FEE_ADDRESS,
            owner=OWNER,
        ))
        # the bonding side of the hub owns total_balance; seed it directly
        store_state(self.ledger.storage(REWARD_CONTRACT), State(
            total_balance=params.bonded_principal,
            prev_reward_balance=0,
            global_index=FixedDecimal.zero(),
        ))
        self.rng = np.random.default_rng(params.random_seed)
        self.rows: List[dict] = []

    def epoch_rewards(self) -> float:
        """Rewards for one epoch in uusd terms, before the foreign split"""
        epochs_per_year = 365 * self.params.epochs_per_day
        mean = self.params.bonded_principal * self.params.apr / epochs_per_year
        return max(0.0, self.rng.normal(mean, mean * self.params.reward_volatility))

    def simulate(self) -> pd.DataFrame:
        p = self.params
        foreign_rate = float(FixedDecimal.from_str(p.foreign_rate))
        fee_rate = float(FixedDecimal.from_str(p.lido_fee_rate))
        float_index = 0.0
        exact_index = Fraction(0)
        total_steps = p.simulation_days * p.epochs_per_day

        for step in range(total_steps):
            rewards = self.epoch_rewards()
            native = int(rewards * (1 - p.foreign_share))
            foreign = int(rewards * p.foreign_share / foreign_rate)
            self.ledger.bank.mint(REWARD_CONTRACT, Coin("uusd", native))
            if foreign > 0:
                self.ledger.bank.mint(REWARD_CONTRACT, Coin(FOREIGN_DENOM, foreign))

            self.ledger.execute(REWARD_CONTRACT, HUB_CONTRACT, TriggerSwap())
            response = self.ledger.execute(REWARD_CONTRACT, HUB_CONTRACT, UpdateGlobalIndex())
            claimed = int(response.attribute("claimed_rewards"))
            lido_fee = int(response.attribute("lido_fee"))

            # references: float64 model of the same flow, and exact rational
            float_index += (claimed + lido_fee) * (1 - fee_rate) / p.bonded_principal
            exact_index += Fraction(claimed, p.bonded_principal)

            state = self.ledger.query(REWARD_CONTRACT, StateQuery())
            self.rows.append({
                "day": step / p.epochs_per_day,
                "claimed_rewards": claimed,
                "lido_fee": lido_fee,
                "fee_received": self.ledger.bank.balance(FEE_ADDRESS, "uusd"),
                "global_index": float(state.global_index),
                "float_index": float_index,
                "drift_atomics": float(exact_index * DECIMAL_FRACTIONAL - state.global_index.atomics),
            })

        frame = pd.DataFrame(self.rows)
        log.info(
            "%s: final index %.12f, max drift %.3f atomics",
            p.experiment_name, frame["global_index"].iloc[-1], frame["drift_atomics"].max(),
        )
        return frame

    def plot_results(self, frame: pd.DataFrame):
        output_dir = Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)

        fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10))

        # Plot index
        ax1.plot(frame["day"], frame["global_index"], label='Fixed point index')
        ax1.plot(frame["day"], frame["float_index"], label='float64 reference', linestyle='--', alpha=0.6)
        ax1.set_ylabel('Reward per unit principal')
        ax1.set_title('Global Index Over Time')
        ax1.legend()
        ax1.grid(True)

        # Plot rounding drift against the exact rational index
        ax2.plot(frame["day"], frame["drift_atomics"], label='Exact - fixed point', color='orange')
        ax2.set_ylabel('Drift (1e-18 units)')
        ax2.set_title('Accumulated Rounding Drift')
        ax2.legend()
        ax2.grid(True)

        # Plot fees
        ax3.plot(frame["day"], frame["fee_received"], label='Fee address balance', color='green')
        ax3.set_ylabel('uusd')
        ax3.set_xlabel('Time (days)')
        ax3.set_title('Protocol Fee Received (net of tax)')
        ax3.legend()
        ax3.grid(True)

        plt.tight_layout()

        plot_name = f"fee_{self.params.lido_fee_rate}_apr_{self.params.apr}"
        if self.params.random_seed is not None:
            plot_name += f"_seed_{self.params.random_seed}"

        plt.savefig(output_dir / f"{plot_name}.png")
        plt.close()
        frame.to_csv(output_dir / f"{plot_name}.csv", index=False)

def compare_fee_rates(fee_rates: List[str], base_params: SimulationParams):
    """Run the same reward stream under different fee rates and plot the indices together"""
    output_dir = Path('research/results/fee_rate_comparison')
    output_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(1, 1, figsize=(12, 6))

    for fee_rate in fee_rates:
        params = SimulationParams(
            bonded_principal=base_params.bonded_principal,
            apr=base_params.apr,
            reward_volatility=base_params.reward_volatility,
            foreign_share=base_params.foreign_share,
            foreign_rate=base_params.foreign_rate,
            lido_fee_rate=fee_rate,
            simulation_days=base_params.simulation_days,
            epochs_per_day=base_params.epochs_per_day,
            random_seed=base_params.random_seed,
            experiment_name=base_params.experiment_name,
            tax=base_params.tax,
        )
        frame = RewardIndexSimulation(params).simulate()
        ax.plot(frame["day"], frame["global_index"], label=f"fee rate {fee_rate}")

    ax.set_ylabel('Global index')
    ax.set_xlabel('Time (days)')
    ax.set_title('Global Index by Protocol Fee Rate')
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)

    seed_text = f"Random Seed: {base_params.random_seed}" if base_params.random_seed is not None else "No Seed"
    fig.text(0.02, 0.02, seed_text, fontsize=8, alpha=0.7)

    plt.tight_layout()

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    plt.savefig(output_dir / f"fee_comparison_{timestamp}.png", bbox_inches='tight', dpi=300)
    plt.close()

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # per-invocation logs are too chatty for a year of epochs
    logging.getLogger("reward_model").setLevel(logging.WARNING)

    params = SimulationParams(experiment_name="single_run", random_seed=42)
    sim = RewardIndexSimulation(params)
    sim.plot_results(sim.simulate())

    compare_fee_rates(
        ["0.0", "0.05", "0.10", "0.20"],
        SimulationParams(experiment_name="fee_rate_comparison", random_seed=57, simulation_days=100),
    )

if __name__ == "__main__":
    main()
