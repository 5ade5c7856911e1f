from __future__ import annotations
from dataclasses import dataclass, replace
import logging
from typing import Optional

from mfe_fold.energies import NucleicAcidEnergies, EnergyParams, select_energies, to_energy_params
from mfe_fold.folding.errors import CacheFillError, FoldingError
from mfe_fold.folding.fold_state import FoldState, make_fold_state
from mfe_fold.folding.recurrences import FoldingConfig, FoldingEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FoldingContext:
    """
    Everything one folding run needs: the sequence, its energy model and the filled caches.

    A context is only ever handed out fully built. Construction validates the
    alphabet, selects the DNA or RNA parameter set, resolves it at the folding
    temperature and fills both caches over the whole sequence.

    Attributes
    ----------
    seq : str
        Upper-cased sequence.
    temp_c : float
        Folding temperature in °C.
    temp_k : float
        Folding temperature in Kelvin.
    energies : NucleicAcidEnergies
        The shared parameter set selected for the sequence alphabet.
    params : EnergyParams
        Integer tables at `temp_k`.
    state : FoldState
        The filled V and W caches.
    """
    seq: str
    temp_c: float
    temp_k: float
    energies: NucleicAcidEnergies
    params: EnergyParams
    state: FoldState

    @classmethod
    def create(cls, seq: str, temp_c: float = 37.0, *, config: Optional[FoldingConfig] = None) -> "FoldingContext":
        """
        Builds a context and runs the dynamic program.

        Parameters
        ----------
        seq : str
            DNA or RNA sequence, any case.
        temp_c : float, optional
            Folding temperature in °C, by default 37.0. Overrides `config.temp_c`.
        config : Optional[FoldingConfig], optional
            Engine settings; defaults are used when omitted.

        Returns
        -------
        FoldingContext

        Raises
        ------
        AlphabetError
            If `seq` is neither DNA nor RNA.
        CacheFillError
            If filling the caches fails for any other reason.
        """
        seq_upper = seq.upper()
        energies = select_energies(seq_upper)

        config = replace(config or FoldingConfig(), temp_c=temp_c)
        params = to_energy_params(energies, temp_c, scale=config.scale)
        state = make_fold_state(len(seq_upper))

        logger.info(f"Folding {energies.KIND} sequence of length {len(seq_upper)} at {temp_c}°C")

        engine = FoldingEngine(params=params, config=config)
        try:
            engine.fill_all_matrices(seq_upper, state)
        except FoldingError:
            raise
        except Exception as exc:
            logger.error(f"Cache fill failed for {seq_upper[:50]!r}: {exc}")
            raise CacheFillError(f"Failed to fill the folding caches: {exc}") from exc

        return cls(
            seq=seq_upper,
            temp_c=temp_c,
            temp_k=params.temp_k,
            energies=energies,
            params=params,
            state=state,
        )

    @property
    def seq_len(self) -> int:
        return len(self.seq)

    @property
    def scale(self) -> int:
        return self.params.scale
