"""
NSGA-II multi-objective optimizer for drive tuning.

Searches four drive parameters
- PWM carrier frequency
- Modulation index
- Fan speed
- Coolant flow

and minimizes three objectives measured on a fixed evaluation scenario:
- Mean power loss (switching + conduction)
- Peak temperature of motor and inverter
- Mean absolute speed error

Each candidate is simulated on its own ``DriveSimulation``, seeded from the
optimizer's generator, so evaluations are independent and a generation can
be spread over worker processes without changing the result.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, fields
from typing import List, Tuple, Optional, Dict, Any
import random
import math
import copy

from ..models.modes import ControlMode, FaultType, LoadType, PwmType, ProtectionMode
from ..models.parameters import (
    PowerStageSettings,
    CoolingSettings,
    DriveReferences,
    ProtectionSettings
)
from ..calculations.losses import calculate_drive_losses
from ..utils.constants import ParameterRanges, SIMULATION_TIME_STEP
from .simulation import DriveSimulation


# Gene name -> (lower, upper) bound
GENE_BOUNDS: Dict[str, Tuple[float, float]] = {
    'pwm_frequency': (ParameterRanges.PWM_FREQ_MIN, ParameterRanges.PWM_FREQ_MAX),
    'modulation_index': (ParameterRanges.MOD_INDEX_MIN, ParameterRanges.MOD_INDEX_MAX),
    'fan_speed': (ParameterRanges.FAN_SPEED_MIN, ParameterRanges.FAN_SPEED_MAX),
    'coolant_flow': (ParameterRanges.COOLANT_FLOW_MIN, ParameterRanges.COOLANT_FLOW_MAX),
}

MUTATION_SIGMA_FRACTION = 0.1   # Gaussian step, fraction of the gene range


@dataclass
class DriveGenes:
    """
    Genetic encoding of the tunable drive parameters.
    """
    pwm_frequency: float       # Carrier frequency [Hz]
    modulation_index: float    # Modulation index [-]
    fan_speed: float           # Fan speed [0-1]
    coolant_flow: float        # Coolant flow [L/min]

    def clone(self) -> 'DriveGenes':
        """Create a deep copy."""
        return copy.deepcopy(self)

    def clamp(self):
        """Pull every gene back inside its bounds."""
        for name, (low, high) in GENE_BOUNDS.items():
            setattr(self, name, max(low, min(high, getattr(self, name))))

    def validate(self) -> bool:
        """Check if every gene lies inside its bounds."""
        return all(
            ParameterRanges.contains(getattr(self, name), low, high)
            for name, (low, high) in GENE_BOUNDS.items()
        )

    def as_list(self) -> List[float]:
        return [getattr(self, name) for name in GENE_BOUNDS]


@dataclass(frozen=True)
class DriveObjectives:
    """
    Objective vector of one candidate. All three are minimized.
    """
    power_loss: float          # Mean switching + conduction loss [W]
    peak_temperature: float    # Max of motor and inverter temperature [°C]
    speed_error: float         # Mean |ω - ω_ref| [rad/s]

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.power_loss, self.peak_temperature, self.speed_error)

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(value) for value in self.as_tuple())

    @classmethod
    def worst(cls) -> 'DriveObjectives':
        """Maximally unfit objectives for failed evaluations."""
        return cls(math.inf, math.inf, math.inf)


@dataclass
class Individual:
    """
    Individual in the NSGA-II population (one candidate parameter set).
    """
    genes: DriveGenes
    objectives: Optional[DriveObjectives] = None
    rank: int = 0
    crowding_distance: float = 0.0


@dataclass(frozen=True)
class EvaluationSettings:
    """
    Fixed scenario every candidate is simulated on.

    The defaults reproduce the reference tuning run: one second of V/f
    operation with space-vector modulation under a forced overcurrent,
    warning-only thermal protection and a constant load.
    """
    duration: float = 1.0
    time_step: float = SIMULATION_TIME_STEP
    control_mode: ControlMode = ControlMode.SCALAR
    pwm_type: PwmType = PwmType.SPACE_VECTOR
    load_type: LoadType = LoadType.CONSTANT
    forced_fault: FaultType = FaultType.OVERCURRENT
    references: DriveReferences = field(default_factory=DriveReferences)
    protection: ProtectionSettings = field(
        default_factory=lambda: ProtectionSettings(
            max_temp=150.0, mode=ProtectionMode.WARNING, auto_reset=True
        )
    )
    dc_link_voltage: float = ParameterRanges.DC_LINK_TYPICAL
    dead_time: float = 1e-6

    def __post_init__(self):
        if self.time_step <= 0:
            raise ValueError(f"Time step must be positive, got {self.time_step}")
        if self.duration < self.time_step:
            raise ValueError(
                f"Duration must cover at least one step ({self.time_step} s), got {self.duration}"
            )

    @property
    def n_steps(self) -> int:
        return max(1, int(round(self.duration / self.time_step)))


# =============================================================================
# EVALUATION
# =============================================================================

def evaluate_candidate(
    genes: DriveGenes,
    settings: EvaluationSettings,
    seed: Optional[int] = None
) -> DriveObjectives:
    """
    Simulate one candidate on a fresh harness and measure its objectives.

    Args:
        genes: Candidate parameters
        settings: Evaluation scenario
        seed: Seed for the harness generator

    Returns:
        Objective vector (may be non-finite if the run diverged)
    """
    power_stage = PowerStageSettings(
        dc_link_voltage=settings.dc_link_voltage,
        pwm_frequency=genes.pwm_frequency,
        dead_time=settings.dead_time,
        modulation_index=genes.modulation_index
    )
    cooling = CoolingSettings(fan_speed=genes.fan_speed, coolant_flow=genes.coolant_flow)
    sim = DriveSimulation(
        power_stage=power_stage,
        cooling=cooling,
        time_step=settings.time_step,
        seed=seed
    )
    sim.inject_fault(settings.forced_fault)

    total_loss = 0.0
    total_speed_error = 0.0
    peak_temperature = sim.motor.ambient

    n_steps = settings.n_steps
    for _ in range(n_steps):
        record = sim.step(
            settings.references,
            settings.control_mode,
            settings.pwm_type,
            settings.load_type,
            settings.protection
        )
        losses = calculate_drive_losses(
            power_stage.pwm_frequency,
            power_stage.dc_link_voltage,
            record.currents,
            sim.motor.parameters.resistance
        )
        total_loss += losses.total
        peak_temperature = max(peak_temperature, record.motor_temperature,
                               record.inverter_temperature)
        total_speed_error += abs(record.speed - settings.references.speed_ref)

    return DriveObjectives(
        power_loss=total_loss / n_steps,
        peak_temperature=peak_temperature,
        speed_error=total_speed_error / n_steps
    )


def _safe_evaluate(
    genes: DriveGenes,
    settings: EvaluationSettings,
    seed: int
) -> Tuple[DriveObjectives, Optional[str]]:
    """Evaluate, turning numerical failures into worst objectives plus a reason."""
    try:
        objectives = evaluate_candidate(genes, settings, seed)
    except (ArithmeticError, ValueError) as e:
        return DriveObjectives.worst(), f"Evaluation failed with error: {e}"
    if not objectives.is_finite:
        return DriveObjectives.worst(), f"Non-finite objectives {objectives.as_tuple()}"
    return objectives, None


# =============================================================================
# NON-DOMINATED SORTING
# =============================================================================

def dominates(a: DriveObjectives, b: DriveObjectives) -> bool:
    """True if ``a`` is no worse on every objective and better on one."""
    a_values, b_values = a.as_tuple(), b.as_tuple()
    no_worse = all(x <= y for x, y in zip(a_values, b_values))
    better = any(x < y for x, y in zip(a_values, b_values))
    return no_worse and better


def fast_non_dominated_sort(individuals: List[Individual]) -> List[List[Individual]]:
    """
    Partition individuals into Pareto fronts and set their ranks.

    Front 1 holds the non-dominated members, front k+1 those dominated
    only by members of fronts 1..k.

    Returns:
        Fronts in rank order; every individual appears exactly once
    """
    n = len(individuals)
    dominated_by: List[List[int]] = [[] for _ in range(n)]
    domination_count = [0] * n
    fronts: List[List[int]] = [[]]

    for p in range(n):
        for q in range(n):
            if p == q:
                continue
            if dominates(individuals[p].objectives, individuals[q].objectives):
                dominated_by[p].append(q)
            elif dominates(individuals[q].objectives, individuals[p].objectives):
                domination_count[p] += 1
        if domination_count[p] == 0:
            individuals[p].rank = 1
            fronts[0].append(p)

    k = 0
    while fronts[k]:
        next_front = []
        for p in fronts[k]:
            for q in dominated_by[p]:
                domination_count[q] -= 1
                if domination_count[q] == 0:
                    individuals[q].rank = k + 2
                    next_front.append(q)
        k += 1
        fronts.append(next_front)

    return [[individuals[i] for i in front] for front in fronts if front]


def assign_crowding_distance(front: List[Individual]):
    """
    Crowding distance within one front.

    Boundary members of each objective get infinity; interior members sum
    the normalized gap between their neighbours. Objectives whose range is
    zero or non-finite contribute nothing.
    """
    for individual in front:
        individual.crowding_distance = 0.0
    if len(front) <= 2:
        for individual in front:
            individual.crowding_distance = math.inf
        return

    n_objectives = len(front[0].objectives.as_tuple())
    for m in range(n_objectives):
        ordered = sorted(front, key=lambda ind: ind.objectives.as_tuple()[m])
        low = ordered[0].objectives.as_tuple()[m]
        high = ordered[-1].objectives.as_tuple()[m]
        ordered[0].crowding_distance = math.inf
        ordered[-1].crowding_distance = math.inf

        span = high - low
        if span == 0 or not math.isfinite(span):
            continue
        for i in range(1, len(ordered) - 1):
            gap = ordered[i + 1].objectives.as_tuple()[m] - ordered[i - 1].objectives.as_tuple()[m]
            ordered[i].crowding_distance += gap / span


# =============================================================================
# OPTIMIZER
# =============================================================================

class NSGA2Optimizer:
    """
    NSGA-II for drive parameter tuning.
    """

    def __init__(
        self,
        population_size: int = 50,
        n_generations: int = 100,
        crossover_rate: float = 0.9,
        mutation_rate: float = 0.1,
        evaluation: Optional[EvaluationSettings] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        n_workers: int = 1,
        verbose: bool = True
    ):
        """
        Initialize the optimizer.

        Args:
            population_size: Number of individuals N
            n_generations: Number of generations G
            crossover_rate: Probability of arithmetic crossover per pair
            mutation_rate: Probability of Gaussian mutation per gene
            evaluation: Scenario used to score candidates
            seed: Seed for the optimizer generator (ignored when ``rng`` given)
            rng: Generator driving initialisation, operators and evaluation seeds
            n_workers: Worker processes for evaluation (1 = in-process)
            verbose: Print progress
        """
        if population_size < 2:
            raise ValueError(f"Population size must be >= 2, got {population_size}")
        if n_generations < 0:
            raise ValueError(f"Generations must be non-negative, got {n_generations}")
        if not (0.0 <= crossover_rate <= 1.0 and 0.0 <= mutation_rate <= 1.0):
            raise ValueError("Crossover and mutation rates must be in [0, 1]")
        if n_workers < 1:
            raise ValueError(f"Workers must be >= 1, got {n_workers}")

        self.population_size = population_size
        self.n_generations = n_generations
        self.crossover_rate = crossover_rate
        self.mutation_rate = mutation_rate
        self.evaluation = evaluation or EvaluationSettings()
        self.rng = rng or random.Random(seed)
        self.n_workers = n_workers
        self.verbose = verbose

        self.population: List[Individual] = []
        self.history: List[Dict[str, Any]] = []
        self.n_failed_evaluations = 0

    def _log(self, message: str):
        """Print if verbose."""
        if self.verbose:
            print(message)

    def initialize_population(self):
        """Create initial random population, uniform within the bounds."""
        self._log(f"\nInitializing population of {self.population_size} individuals...")

        self.population = []
        for _ in range(self.population_size):
            values = {name: self.rng.uniform(low, high) for name, (low, high) in GENE_BOUNDS.items()}
            self.population.append(Individual(genes=DriveGenes(**values)))

        self._log(f"Population initialized with {len(self.population)} individuals")

    def evaluate_population(self, individuals: List[Individual]):
        """
        Evaluate every individual that has no objectives yet.

        Seeds are drawn from the optimizer generator in population order
        before any evaluation starts, so the outcome does not depend on
        ``n_workers``.
        """
        pending = [ind for ind in individuals if ind.objectives is None]
        if not pending:
            return
        seeds = [self.rng.getrandbits(32) for _ in pending]
        genes = [ind.genes for ind in pending]
        settings = [self.evaluation] * len(pending)

        if self.n_workers > 1:
            with ProcessPoolExecutor(max_workers=self.n_workers) as executor:
                results = list(executor.map(_safe_evaluate, genes, settings, seeds))
        else:
            results = [_safe_evaluate(g, s, seed) for g, s, seed in zip(genes, settings, seeds)]

        for individual, (objectives, failure) in zip(pending, results):
            individual.objectives = objectives
            if failure is not None:
                self.n_failed_evaluations += 1
                self._log(f"  Warning: {failure} for {individual.genes}")

    def assign_ranks_and_crowding(self, individuals: List[Individual]) -> List[List[Individual]]:
        """Rank by non-dominated sorting and compute crowding per front."""
        fronts = fast_non_dominated_sort(individuals)
        for front in fronts:
            assign_crowding_distance(front)
        return fronts

    def tournament_selection(self) -> Individual:
        """
        Binary tournament: lower rank wins, ties go to the larger crowding
        distance, remaining ties to the first contestant.
        """
        a = self.rng.choice(self.population)
        b = self.rng.choice(self.population)
        if a.rank != b.rank:
            return a if a.rank < b.rank else b
        return a if a.crowding_distance >= b.crowding_distance else b

    def crossover(self, parent1: Individual, parent2: Individual) -> Tuple[Individual, Individual]:
        """
        Arithmetic crossover with an independent blend factor per gene.

        With probability ``1 - crossover_rate`` the children are clones.
        """
        if self.rng.random() >= self.crossover_rate:
            return Individual(genes=parent1.genes.clone()), Individual(genes=parent2.genes.clone())

        g1, g2 = parent1.genes, parent2.genes
        values1, values2 = {}, {}
        for f in fields(DriveGenes):
            alpha = self.rng.random()
            x1, x2 = getattr(g1, f.name), getattr(g2, f.name)
            values1[f.name] = alpha * x1 + (1 - alpha) * x2
            values2[f.name] = (1 - alpha) * x1 + alpha * x2

        child1, child2 = DriveGenes(**values1), DriveGenes(**values2)
        child1.clamp()
        child2.clamp()
        return Individual(genes=child1), Individual(genes=child2)

    def mutate(self, individual: Individual):
        """
        Gaussian mutation, each gene with probability ``mutation_rate``.

        σ is 10 % of the gene range; the gene is clamped afterwards.
        """
        genes = individual.genes
        for name, (low, high) in GENE_BOUNDS.items():
            if self.rng.random() < self.mutation_rate:
                sigma = MUTATION_SIGMA_FRACTION * (high - low)
                setattr(genes, name, getattr(genes, name) + self.rng.gauss(0.0, sigma))
        genes.clamp()
        individual.objectives = None

    def generate_offspring(self) -> List[Individual]:
        """Create N children by tournament, crossover and mutation."""
        offspring: List[Individual] = []
        while len(offspring) < self.population_size:
            parent1 = self.tournament_selection()
            parent2 = self.tournament_selection()
            child1, child2 = self.crossover(parent1, parent2)
            self.mutate(child1)
            self.mutate(child2)
            offspring.append(child1)
            if len(offspring) < self.population_size:
                offspring.append(child2)
        return offspring

    def select_next_population(self, combined: List[Individual]) -> List[Individual]:
        """Keep the best N of parents + offspring by (rank, -crowding)."""
        self.assign_ranks_and_crowding(combined)
        survivors = sorted(combined, key=lambda ind: (ind.rank, -ind.crowding_distance))
        return survivors[:self.population_size]

    def pareto_front(self) -> List[Individual]:
        """Rank-1 members of the current population, sorted by power loss."""
        self.assign_ranks_and_crowding(self.population)
        front = [ind for ind in self.population if ind.rank == 1]
        return sorted(front, key=lambda ind: ind.objectives.power_loss)

    def _record_generation(self, generation: int):
        """Store and log objective statistics of the population."""
        front_size = sum(1 for ind in self.population if ind.rank == 1)
        entry: Dict[str, Any] = {'generation': generation, 'front_size': front_size}

        for name in ('power_loss', 'peak_temperature', 'speed_error'):
            values = [getattr(ind.objectives, name) for ind in self.population]
            finite = [v for v in values if math.isfinite(v)]
            entry[f'best_{name}'] = min(values)
            entry[f'mean_{name}'] = sum(finite) / len(finite) if finite else math.inf

        self.history.append(entry)
        self._log(f"Front size: {front_size}")
        self._log(f"Power loss [W]: best {entry['best_power_loss']:.2f}, "
                  f"mean {entry['mean_power_loss']:.2f}")
        self._log(f"Peak temperature [°C]: best {entry['best_peak_temperature']:.2f}, "
                  f"mean {entry['mean_peak_temperature']:.2f}")
        self._log(f"Speed error [rad/s]: best {entry['best_speed_error']:.2f}, "
                  f"mean {entry['mean_speed_error']:.2f}")

    def optimize(self) -> List[Individual]:
        """
        Run NSGA-II for n_generations.

        Returns:
            Rank-1 members of the final population sorted by power loss
        """
        self._log(f"\n{'='*70}")
        self._log("NSGA-II DRIVE OPTIMIZATION")
        self._log(f"{'='*70}")
        self._log(f"Population size: {self.population_size}")
        self._log(f"Generations: {self.n_generations}")
        self._log(f"Crossover rate: {self.crossover_rate}")
        self._log(f"Mutation rate: {self.mutation_rate}")
        self._log(f"Evaluation: {self.evaluation.duration} s at dt = {self.evaluation.time_step} s, "
                  f"{self.n_workers} worker(s)")

        self.initialize_population()
        self.evaluate_population(self.population)
        self.assign_ranks_and_crowding(self.population)

        for generation in range(self.n_generations):
            self._log(f"\n--- Generation {generation + 1}/{self.n_generations} ---")

            offspring = self.generate_offspring()
            self.evaluate_population(offspring)
            self.population = self.select_next_population(self.population + offspring)

            self._record_generation(generation + 1)

        front = self.pareto_front()

        self._log(f"\n{'='*70}")
        self._log("OPTIMIZATION COMPLETE")
        self._log(f"{'='*70}")
        self._log(f"Pareto front: {len(front)} solutions, "
                  f"{self.n_failed_evaluations} failed evaluation(s)")
        for ind in front[:5]:
            g, o = ind.genes, ind.objectives
            self._log(f"  f_pwm = {g.pwm_frequency:8.1f} Hz, m = {g.modulation_index:.3f}, "
                      f"fan = {g.fan_speed:.2f}, coolant = {g.coolant_flow:.2f} L/min "
                      f"-> loss {o.power_loss:.1f} W, T_peak {o.peak_temperature:.1f} °C, "
                      f"speed err {o.speed_error:.2f} rad/s")

        return front


def optimize_drive(
    *,
    evaluation: Optional[EvaluationSettings] = None,
    seed: Optional[int] = None,
    verbose: bool = True,
    **optimizer_kwargs: Any
) -> Tuple[List[Individual], NSGA2Optimizer]:
    """
    Convenience wrapper that runs the NSGA-II optimizer end-to-end.

    Args:
        evaluation: Scenario used to score candidates
        seed: Seed for reproducible runs
        verbose: Print progress information
        **optimizer_kwargs: Extra options forwarded to ``NSGA2Optimizer``
            (e.g. population_size, n_generations, n_workers, ...)

    Returns:
        Tuple with the Pareto front and the configured optimizer.
    """
    optimizer = NSGA2Optimizer(
        evaluation=evaluation,
        seed=seed,
        verbose=verbose,
        **optimizer_kwargs
    )
    front = optimizer.optimize()

    return front, optimizer
