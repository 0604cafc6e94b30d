from enum import Enum
from typing import Callable, Dict, List, Optional

from populator import stages
from populator.stages import PopulationContext


class Stage(Enum):
    FUND_ETH = "fund_eth"
    FUND_TOKENS = "fund_tokens"
    REGISTER_IDENTITIES = "register_identities"
    REGISTER_NAMES = "register_names"
    PUBLISH_SUBGRAPHS = "publish_subgraphs"
    CURATE = "curate"
    REGISTER_SERVICES = "register_services"
    STAKE = "stake"


STAGE_FUNCTIONS: Dict[Stage, Callable[[PopulationContext], None]] = {
    Stage.FUND_ETH: stages.send_eth,
    Stage.FUND_TOKENS: stages.populate_graph_token,
    Stage.REGISTER_IDENTITIES: stages.populate_ethereum_did_registry,
    Stage.REGISTER_NAMES: stages.populate_ens,
    Stage.PUBLISH_SUBGRAPHS: stages.populate_gns,
    Stage.CURATE: stages.populate_curation,
    Stage.REGISTER_SERVICES: stages.populate_service_registry,
    Stage.STAKE: stages.populate_staking,
}

# ETH funding only makes sense against a freshly deployed network
DEFAULT_STAGES = [stage for stage in Stage if stage != Stage.FUND_ETH]


def get_stages(fund_eth: bool = False) -> List[Stage]:
    return list(Stage) if fund_eth else list(DEFAULT_STAGES)


class PopulationSequence:
    """
    Runs the population stages in a fixed order, each at most once.

    The position only moves past a stage once all of its transactions are
    confirmed, so after a failure `current` is the stage that failed.
    Nothing is persisted; resuming means starting a new sequence at that stage.
    """

    class SequenceComplete(Exception):
        pass

    def __init__(
        self,
        context: PopulationContext,
        stages: Optional[List[Stage]] = None,
        start: Optional[Stage] = None,
    ):
        self.context = context
        self.stages = list(stages) if stages is not None else list(DEFAULT_STAGES)
        self.completed: List[Stage] = list()
        self._position = 0
        if start is not None:
            if start not in self.stages:
                raise ValueError(f"Cannot start at {start.value}, it is not part of this sequence")
            self._position = self.stages.index(start)

    @property
    def current(self) -> Optional[Stage]:
        if self.is_complete:
            return None
        return self.stages[self._position]

    @property
    def remaining(self) -> List[Stage]:
        return self.stages[self._position :]

    @property
    def is_complete(self) -> bool:
        return self._position >= len(self.stages)

    def advance(self) -> Stage:
        """Runs the current stage and moves on to the next one."""
        stage = self.current
        if stage is None:
            raise self.SequenceComplete("All stages have already run")
        print(f"\n({self._position + 1}/{len(self.stages)}) {stage.value}")
        STAGE_FUNCTIONS[stage](self.context)
        self.completed.append(stage)
        self._position += 1
        return stage

    def run(self) -> List[Stage]:
        while not self.is_complete:
            self.advance()
        return self.completed
