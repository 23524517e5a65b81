"""Main OCCAM variable-based manager: reference models, lattice generation and statistics"""

import enum
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .attributes import (
    ATTRIBUTE_ALPHA, ATTRIBUTE_BETA, ATTRIBUTE_BP_ALPHA, ATTRIBUTE_BP_BETA,
    ATTRIBUTE_BP_COND_DH, ATTRIBUTE_BP_COND_H, ATTRIBUTE_BP_COND_PCT_DH,
    ATTRIBUTE_BP_EXPLAINED_I, ATTRIBUTE_BP_H, ATTRIBUTE_BP_LR, ATTRIBUTE_BP_T,
    ATTRIBUTE_BP_UNEXPLAINED_I, ATTRIBUTE_COND_DH, ATTRIBUTE_COND_H,
    ATTRIBUTE_COND_PCT_DH, ATTRIBUTE_DDF, ATTRIBUTE_DEP_H, ATTRIBUTE_DF,
    ATTRIBUTE_EXPLAINED_I, ATTRIBUTE_H, ATTRIBUTE_IND_H, ATTRIBUTE_LR,
    ATTRIBUTE_MAX_REL_WIDTH, ATTRIBUTE_MIN_REL_WIDTH, ATTRIBUTE_P2,
    ATTRIBUTE_P2_ALPHA, ATTRIBUTE_P2_BETA, ATTRIBUTE_PCT_CORRECT, ATTRIBUTE_T,
    ATTRIBUTE_UNEXPLAINED_I, REFERENCE_ATTRIBUTES,
)
from .config import load_config
from .definitions import Model, Options, Relation, Table, VBMManager
from .distributions import chin2, csa, ppchi
from .fit import pearson_chi_squared, transmission
from .processors import BPIntersectProcessor, DFProcessor, HProcessor
from .report import SortDirection
from .variable_list import DV, IV

logger = logging.getLogger(__name__)

COMPARE_EPSILON = 1.0e-10
LN2 = math.log(2.0)


class RelOp(enum.Enum):
    """Filter comparison operators"""
    LESSTHAN = "<"
    EQUALS = "="
    GREATERTHAN = ">"


def _clamp_unit(value: float) -> float:
    """Pull a normalized quantity back into [0, 1] after roundoff"""
    if value <= 0.0:
        return 0.0
    if value >= 1.0:
        return 1.0
    return value


class VBMManagerImplementation:
    """Implementation class for VBMManager operations"""

    # -- construction

    @staticmethod
    def initialize(manager: VBMManager) -> None:
        """Bind the saturated relation to the input data and build reference models"""
        var_count = manager.varlist.get_var_count()
        if var_count == 0:
            raise ValueError("No active variables")
        if manager.input_data.key_size != var_count:
            raise ValueError(
                f"Input key size {manager.input_data.key_size} does not match "
                f"{var_count} variables"
            )

        top = manager.get_relation(range(var_count), make_project=False)
        top.table = manager.input_data
        manager.make_reference_models(top)

    @staticmethod
    def from_dataframe(data: pd.DataFrame, varlist, options: Optional[Options] = None,
                       freq_column: Optional[str] = None) -> VBMManager:
        """Create manager from observations in a DataFrame"""
        table, sample_size = Table.from_dataframe(data, varlist, freq_column)
        logger.info("Sample size %g, %d distinct states", sample_size, table.tuple_count)
        return VBMManager(varlist, table, sample_size, options or Options())

    @staticmethod
    def from_files(data_file: Union[str, Path], yaml_file: Union[str, Path],
                   freq_column: Optional[str] = None) -> VBMManager:
        """Create manager from a tab-separated data file and a YAML config"""
        varlist, options = load_config(yaml_file)
        data = pd.read_csv(data_file, sep='\t')
        return VBMManagerImplementation.from_dataframe(data, varlist, options, freq_column)

    # -- relations and models

    @staticmethod
    def get_relation(manager: VBMManager, indices: Iterable[int],
                     make_project: bool = True) -> Relation:
        """Fetch the cached relation over indices, creating it if needed"""
        indices = tuple(sorted(set(indices)))
        var_count = manager.varlist.get_var_count()
        if not indices:
            raise ValueError("Relation must have at least one variable")
        if indices[0] < 0 or indices[-1] >= var_count:
            raise ValueError(f"Variable index out of range in {indices}")

        relation, _ = manager.relation_cache.publish(Relation(indices, manager.varlist))
        if make_project:
            manager.make_projection(relation)
        return relation

    @staticmethod
    def make_relation(manager: VBMManager, name: str, make_project: bool = True) -> Relation:
        """Fetch or create a relation from its name, e.g. 'ApEd'"""
        indices = manager.varlist.parse_relation_name(name)
        return VBMManagerImplementation.get_relation(manager, indices, make_project)

    @staticmethod
    def get_child_relation(manager: VBMManager, relation: Relation, skip: int,
                           make_project: bool = True) -> Relation:
        """Relation with the variable at position skip removed"""
        indices = relation.indices[:skip] + relation.indices[skip + 1:]
        return VBMManagerImplementation.get_relation(manager, indices, make_project)

    @staticmethod
    def make_all_child_relations(manager: VBMManager, relation: Relation,
                                 make_project: bool = True) -> List[Relation]:
        """
        All relations one order lower than relation, each with one variable
        removed. Removing from the last position backwards yields them in
        sorted order.
        """
        order = relation.get_variable_count()
        if order < 2:
            raise ValueError(f"Relation {relation.name} has no children")
        return [
            VBMManagerImplementation.get_child_relation(manager, relation, r, make_project)
            for r in range(order - 1, -1, -1)
        ]

    @staticmethod
    def make_child_model(manager: VBMManager, model: Model, remove: int,
                         make_project: bool = True) -> Tuple[Model, bool]:
        """
        Replace relation `remove` of model by all its children.

        Returns:
            The canonical child model and whether it came from the cache
        """
        count = model.get_relation_count()
        if not 0 <= remove < count:
            raise IndexError(f"Relation index {remove} out of range for {model.get_name()}")

        new_model = Model()
        for i, relation in enumerate(model.relations):
            if i == remove:
                for child in VBMManagerImplementation.make_all_child_relations(
                        manager, relation, make_project):
                    new_model.add_relation(child)
            else:
                new_model.add_relation(relation)

        # Return one from cache if possible
        return manager.model_cache.publish(new_model)

    @staticmethod
    def make_model(manager: VBMManager, name: str, make_project: bool = True) -> Model:
        """
        Fetch or create a model from its name, e.g. 'IV:ApZ:EdZ'.

        In directed systems 'IV' stands for the relation of all independent
        variables, which is added when no relation already contains them.
        """
        parts = [part for part in name.split(':') if part]
        if not parts:
            raise ValueError("Empty model specification")

        varlist = manager.varlist
        directed = varlist.is_directed()
        iv_indices = varlist.get_iv_indices()

        model = Model()
        for part in parts:
            if part == 'IV' and directed:
                if not iv_indices:
                    raise ValueError("System has no independent variables")
                indices = iv_indices
            else:
                indices = varlist.parse_relation_name(part)
            model.add_relation(VBMManagerImplementation.get_relation(manager, indices, make_project))

        if directed and iv_indices and not any(
                set(iv_indices).issubset(r.indices) for r in model.relations):
            model.add_relation(VBMManagerImplementation.get_relation(manager, iv_indices, make_project))

        # Verify all variables are used
        missing = set(range(varlist.get_var_count())) - model.get_variable_indices()
        if missing:
            abbrevs = varlist.get_active_abbrevs()
            raise ValueError(f"Model {name} missing variables: {[abbrevs[i] for i in sorted(missing)]}")

        model, _ = manager.model_cache.publish(model)
        return model

    # -- reference models

    @staticmethod
    def make_reference_models(manager: VBMManager, top: Relation) -> None:
        """
        Build the top (saturated) and bottom (independence) reference models.

        The bottom model has a relation per variable in a neutral system.
        In a directed system it has one relation with all the independent
        variables and a unary relation per dependent variable.
        """
        top_model = Model()
        top_model.add_relation(top)
        manager.top_ref, _ = manager.model_cache.publish(top_model)

        varlist = manager.varlist
        bottom = Model()
        if varlist.is_directed():
            iv_indices = varlist.get_iv_indices()
            if iv_indices:
                bottom.add_relation(manager.get_relation(iv_indices))
            for i in varlist.get_dv_indices():
                bottom.add_relation(manager.get_relation([i]))
        else:
            for i in range(varlist.get_var_count()):
                bottom.add_relation(manager.get_relation([i]))
        manager.bottom_ref, _ = manager.model_cache.publish(bottom)

        manager.compute_df(manager.top_ref)
        manager.compute_h(manager.top_ref)
        manager.compute_df(manager.bottom_ref)
        manager.compute_h(manager.bottom_ref)
        # Relation statistics for the top relation
        manager.compute_statistics(manager.top_ref.get_relation(0))

        # Default reference depends on whether the system is directed or neutral
        manager.ref_model = manager.bottom_ref if varlist.is_directed() else manager.top_ref
        logger.debug("Reference models: top=%s bottom=%s",
                     manager.top_ref.get_name(), manager.bottom_ref.get_name())

    @staticmethod
    def set_ref_model(manager: VBMManager, name: str) -> Model:
        """Select the reference model: 'top', 'bottom' or any model name"""
        if name.lower() == 'top':
            ref = manager.top_ref
        elif name.lower() == 'bottom':
            ref = manager.bottom_ref
        else:
            ref = VBMManagerImplementation.make_model(manager, name, True)
        VBMManagerImplementation.select_reference(manager, ref)
        return manager.ref_model

    @staticmethod
    def select_reference(manager: VBMManager, ref: Model) -> None:
        """
        Make ref the active reference. On a change, statistics measured
        against the previous reference are dropped from every cached model.
        """
        if ref is manager.ref_model:
            return
        manager.ref_model = ref
        for model in manager.model_cache.models.values():
            model.attributes.remove_attributes(REFERENCE_ATTRIBUTES)
        logger.debug("Reference model set to %s", ref.get_name())

    @staticmethod
    def get_ind_relation(manager: VBMManager) -> Optional[Relation]:
        """The independent-variables relation of the bottom model, if directed"""
        if not manager.varlist.is_directed():
            return None
        for relation in manager.bottom_ref.relations:
            if relation.is_independent_only():
                return relation
        return None

    # -- relation statistics

    @staticmethod
    def compute_statistics(manager: VBMManager, relation: Relation) -> None:
        """Relation DF and H; for directed systems also H of its IV and DV parts"""
        manager.make_projection(relation)
        relation.compute_df()
        h = relation.compute_entropy()

        attrs = relation.attributes
        if not manager.varlist.is_directed() or attrs.has_attribute(ATTRIBUTE_COND_H):
            return

        types = [manager.varlist.get_variable(i).type for i in relation.indices]
        iv_positions = [pos for pos, t in enumerate(types) if t == IV]
        dv_positions = [pos for pos, t in enumerate(types) if t == DV]
        ind_h = relation.table.project(iv_positions).entropy() if iv_positions else 0.0
        dep_h = relation.table.project(dv_positions).entropy() if dv_positions else 0.0
        attrs.set_attribute(ATTRIBUTE_IND_H, ind_h)
        attrs.set_attribute(ATTRIBUTE_DEP_H, dep_h)
        attrs.set_attribute(ATTRIBUTE_COND_H, h - ind_h)

    # -- structural and information statistics

    @staticmethod
    def compute_df(manager: VBMManager, model: Model) -> float:
        """Degrees of freedom by inclusion-exclusion over relation intersections"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_DF):
            return attrs.get_attribute(ATTRIBUTE_DF)
        processor = DFProcessor()
        manager.do_intersection_processing(model, processor)
        attrs.set_attribute(ATTRIBUTE_DF, processor.df)
        return processor.df

    @staticmethod
    def compute_h(manager: VBMManager, model: Model) -> float:
        """
        Model entropy. Loopless models are computed algebraically from the
        relation entropies; models with loops need the fitted table.
        """
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_H):
            return attrs.get_attribute(ATTRIBUTE_H)
        if not model.has_loops():
            processor = HProcessor(manager.make_projection)
            manager.do_intersection_processing(model, processor)
            h = processor.h
        else:
            h = manager.make_fit_table(model).entropy()
        attrs.set_attribute(ATTRIBUTE_H, h)
        return h

    @staticmethod
    def compute_transmission(manager: VBMManager, model: Model) -> float:
        """Transmission T: information in the data not captured by the model"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_T):
            return attrs.get_attribute(ATTRIBUTE_T)
        if not model.has_loops():
            t = manager.compute_h(model) - manager.compute_h(manager.top_ref)
        else:
            t = transmission(manager.input_data, manager.make_fit_table(model))
        attrs.set_attribute(ATTRIBUTE_T, t)
        return t

    @staticmethod
    def compute_explained_information(manager: VBMManager, model: Model) -> float:
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_EXPLAINED_I):
            return attrs.get_attribute(ATTRIBUTE_EXPLAINED_I)
        top_h = manager.compute_h(manager.top_ref)
        bot_h = manager.compute_h(manager.bottom_ref)
        model_t = manager.compute_transmission(model)
        gap = bot_h - top_h
        info = (gap - model_t) / gap if gap > 0 else 1.0
        # Normalized, but roundoff can push it slightly outside [0, 1]
        info = _clamp_unit(info)
        attrs.set_attribute(ATTRIBUTE_EXPLAINED_I, info)
        return info

    @staticmethod
    def compute_unexplained_information(manager: VBMManager, model: Model) -> float:
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_UNEXPLAINED_I):
            return attrs.get_attribute(ATTRIBUTE_UNEXPLAINED_I)
        top_h = manager.compute_h(manager.top_ref)
        bot_h = manager.compute_h(manager.bottom_ref)
        model_t = manager.compute_transmission(model)
        gap = bot_h - top_h
        info = model_t / gap if gap > 0 else 0.0
        info = _clamp_unit(info)
        attrs.set_attribute(ATTRIBUTE_UNEXPLAINED_I, info)
        return info

    @staticmethod
    def compute_ddf(manager: VBMManager, model: Model) -> float:
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_DDF):
            return attrs.get_attribute(ATTRIBUTE_DDF)
        ref_df = manager.compute_df(manager.ref_model)
        model_df = manager.compute_df(model)
        # Against the bottom reference the difference is negative
        ddf = abs(ref_df - model_df)
        attrs.set_attribute(ATTRIBUTE_DDF, ddf)
        return ddf

    @staticmethod
    def compute_df_statistics(manager: VBMManager, model: Model) -> None:
        manager.compute_df(model)
        manager.compute_ddf(model)

    @staticmethod
    def compute_information_statistics(manager: VBMManager, model: Model) -> None:
        manager.compute_h(model)
        manager.compute_transmission(model)
        manager.compute_explained_information(model)
        manager.compute_unexplained_information(model)

    @staticmethod
    def compute_rel_width(manager: VBMManager, model: Model) -> None:
        """Largest and smallest relation order in the model"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_MAX_REL_WIDTH):
            return
        widths = [r.get_variable_count() for r in model.relations]
        attrs.set_attribute(ATTRIBUTE_MAX_REL_WIDTH, max(widths))
        attrs.set_attribute(ATTRIBUTE_MIN_REL_WIDTH, min(widths))

    # -- significance statistics

    @staticmethod
    def _compute_significance(manager: VBMManager, ref_stat: float,
                              ref_ddf: float) -> Tuple[float, float, float, float]:
        """
        Alpha and power for a chi-squared comparison of model and reference.

        Returns:
            The corrected statistic, corrected DDF, alpha and power
        """
        # Depending on where the reference sits relative to the model, both
        # deltas may be negative. Their signs agree, so flip them together.
        if ref_ddf < 0:
            ref_ddf = -ref_ddf
            ref_stat = -ref_stat

        # Eliminate negative value due to small roundoff
        if ref_stat <= 0.0:
            ref_stat = 0.0

        prob = csa(ref_stat, ref_ddf)

        alpha = manager.options.get_option_float('palpha')
        if alpha > 0:
            crit, errcode = ppchi(alpha, ref_ddf)
            if errcode:
                logger.warning("ppchi: errcode=%d", errcode)
        else:
            crit = ref_stat
        cdf, errcode = chin2(crit, ref_ddf, ref_stat)
        if errcode:
            logger.warning("chin2: errcode=%d", errcode)
        return ref_stat, ref_ddf, prob, 1.0 - cdf

    @staticmethod
    def compute_l2_statistics(manager: VBMManager, model: Model) -> None:
        """Likelihood-ratio statistics against the reference: L2 = 2 * n * ln(2) * T"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_LR):
            return

        # Make sure the other attributes are there
        manager.compute_df_statistics(model)
        manager.compute_information_statistics(model)

        ref_model = manager.ref_model
        model_l2 = 2.0 * LN2 * manager.sample_size * manager.compute_transmission(model)
        ref_l2 = 2.0 * LN2 * manager.sample_size * manager.compute_transmission(ref_model)
        ref_ddf = manager.compute_df(model) - manager.compute_df(ref_model)

        lr, ddf, prob, power = VBMManagerImplementation._compute_significance(
            manager, ref_l2 - model_l2, ref_ddf)
        attrs.set_attribute(ATTRIBUTE_DDF, ddf)
        attrs.set_attribute(ATTRIBUTE_LR, lr)
        attrs.set_attribute(ATTRIBUTE_ALPHA, prob)
        attrs.set_attribute(ATTRIBUTE_BETA, power)

    @staticmethod
    def compute_pearson_statistics(manager: VBMManager, model: Model) -> None:
        """
        Pearson chi-squared statistics; these need full fitted tables.

        The reference X2 comes from the fit of the active reference model,
        not always the bottom, so Pearson and L2 compare against the same
        reference and share the sign rule.
        """
        if model is None or manager.bottom_ref is None:
            return
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_P2):
            return

        ref_model = manager.ref_model
        model_fit = manager.make_fit_table(model)
        ref_fit = manager.make_fit_table(ref_model)
        model_p2 = pearson_chi_squared(manager.input_data, model_fit, manager.sample_size)
        ref_p2 = pearson_chi_squared(manager.input_data, ref_fit, manager.sample_size)
        ref_ddf = manager.compute_df(model) - manager.compute_df(ref_model)

        p2, _, prob, power = VBMManagerImplementation._compute_significance(
            manager, ref_p2 - model_p2, ref_ddf)
        attrs.set_attribute(ATTRIBUTE_P2, p2)
        attrs.set_attribute(ATTRIBUTE_P2_ALPHA, prob)
        attrs.set_attribute(ATTRIBUTE_P2_BETA, power)

    @staticmethod
    def compute_dependent_statistics(manager: VBMManager, model: Model) -> None:
        """
        Conditional uncertainty of the DVs given the IVs, u(model) - u(IV),
        and its reduction relative to the bottom reference. Directed only.
        """
        if not manager.varlist.is_directed():
            return
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_COND_H):
            return

        top_relation = manager.top_ref.get_relation(0)
        manager.compute_statistics(top_relation)
        dep_h = top_relation.attributes.get_attribute(ATTRIBUTE_DEP_H)
        ind_relation = manager.get_ind_relation()
        if ind_relation is not None:
            manager.make_projection(ind_relation)
            ind_h = ind_relation.compute_entropy()
        else:
            ind_h = 0.0

        ref_h = manager.compute_h(manager.bottom_ref)
        h = manager.compute_h(model)
        attrs.set_attribute(ATTRIBUTE_COND_H, h - ind_h)
        attrs.set_attribute(ATTRIBUTE_COND_DH, ref_h - h)
        attrs.set_attribute(ATTRIBUTE_COND_PCT_DH,
                            100 * (ref_h - h) / dep_h if dep_h > 0 else 0.0)

    # -- BP approximation

    @staticmethod
    def compute_bpt(manager: VBMManager, model: Model) -> float:
        """Transmission estimated by the Fourier BP method, without a fitted table"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_BP_T):
            return attrs.get_attribute(ATTRIBUTE_BP_T)

        full_dimension = int(manager.top_ref.get_relation(0).compute_df()) + 1
        for relation in model.relations:
            manager.make_projection(relation)

        processor = BPIntersectProcessor(manager.input_data, full_dimension,
                                         manager.make_projection)
        manager.do_intersection_processing(model, processor)
        model_t = processor.get_transmission()
        attrs.set_attribute(ATTRIBUTE_BP_T, model_t)
        return model_t

    @staticmethod
    def compute_bp_statistics(manager: VBMManager, model: Model) -> None:
        """Information, L2 and conditional statistics from the BP transmission"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_BP_LR):
            return

        model_t = manager.compute_bpt(model)
        top_h = manager.compute_h(manager.top_ref)
        # Both BP and standard T are needed for the bottom model
        bot_bpt = manager.compute_bpt(manager.bottom_ref)
        bot_std_t = manager.compute_transmission(manager.bottom_ref)

        # Estimate H by scaling the standard T of the bottom model by the
        # ratio of BP transmissions
        if bot_bpt > 0:
            model_h = top_h + model_t * bot_std_t / bot_bpt
            info = _clamp_unit(model_t / bot_bpt)
        else:
            model_h = top_h
            info = 0.0
        attrs.set_attribute(ATTRIBUTE_BP_H, model_h)
        attrs.set_attribute(ATTRIBUTE_BP_EXPLAINED_I, 1.0 - info)
        attrs.set_attribute(ATTRIBUTE_BP_UNEXPLAINED_I, info)

        manager.compute_df_statistics(model)
        ref_model = manager.ref_model
        model_l2 = 2.0 * LN2 * manager.sample_size * model_t
        ref_l2 = 2.0 * LN2 * manager.sample_size * manager.compute_bpt(ref_model)
        ref_ddf = manager.compute_df(model) - manager.compute_df(ref_model)

        lr, ddf, prob, power = VBMManagerImplementation._compute_significance(
            manager, ref_l2 - model_l2, ref_ddf)
        attrs.set_attribute(ATTRIBUTE_DDF, ddf)
        attrs.set_attribute(ATTRIBUTE_BP_LR, lr)
        attrs.set_attribute(ATTRIBUTE_BP_ALPHA, prob)
        attrs.set_attribute(ATTRIBUTE_BP_BETA, power)

        if not manager.varlist.is_directed():
            return
        top_relation = manager.top_ref.get_relation(0)
        manager.compute_statistics(top_relation)
        dep_h = top_relation.attributes.get_attribute(ATTRIBUTE_DEP_H)
        ind_h = top_relation.attributes.get_attribute(ATTRIBUTE_IND_H)
        ref_h = manager.compute_h(manager.bottom_ref)
        attrs.set_attribute(ATTRIBUTE_BP_COND_H, model_h - ind_h)
        attrs.set_attribute(ATTRIBUTE_BP_COND_DH, ref_h - model_h)
        attrs.set_attribute(ATTRIBUTE_BP_COND_PCT_DH,
                            100 * (ref_h - model_h) / dep_h if dep_h > 0 else 0.0)

    # -- prediction

    @staticmethod
    def compute_percent_correct(manager: VBMManager, model: Model) -> float:
        """Percent of the data predicted correctly by the model's most likely DV state"""
        attrs = model.attributes
        if attrs.has_attribute(ATTRIBUTE_PCT_CORRECT):
            return attrs.get_attribute(ATTRIBUTE_PCT_CORRECT)
        ind_relation = manager.get_ind_relation()
        if ind_relation is None:
            raise ValueError("Percent correct requires a directed system with independent variables")

        fit = manager.make_fit_table(model)
        max_table = manager.make_max_projection(fit, manager.input_data, ind_relation)
        pct = 100 * max_table.total()
        attrs.set_attribute(ATTRIBUTE_PCT_CORRECT, pct)
        return pct

    # -- filtering and sorting

    @staticmethod
    def set_filter(manager: VBMManager, attr: str, value: float,
                   op: Union[RelOp, str]) -> None:
        manager.filter_attr = attr
        manager.filter_value = float(value)
        manager.filter_op = RelOp(op)

    @staticmethod
    def apply_filter(manager: VBMManager, model: Model) -> bool:
        """Check model against the filter; with no filter every model passes"""
        if manager.filter_attr is None:
            return True

        # Make sure required attributes were computed
        manager.compute_rel_width(model)
        manager.compute_l2_statistics(model)
        manager.compute_dependent_statistics(model)

        value = model.attributes.get_attribute(manager.filter_attr)
        if manager.filter_op is RelOp.LESSTHAN:
            return value < manager.filter_value
        if manager.filter_op is RelOp.EQUALS:
            return abs(value - manager.filter_value) < COMPARE_EPSILON
        if manager.filter_op is RelOp.GREATERTHAN:
            return value > manager.filter_value
        return False

    @staticmethod
    def set_sort_attr(manager: VBMManager, name: str,
                      direction: SortDirection = SortDirection.DESCENDING) -> None:
        manager.sort_attr = name
        manager.sort_direction = direction

    # -- summaries

    @staticmethod
    def get_basic_statistics(manager: VBMManager) -> Dict[str, float]:
        """Entropy of the data, and of the IVs and DVs for directed systems"""
        stats = {'h_data': manager.compute_h(manager.top_ref)}
        if manager.varlist.is_directed():
            attrs = manager.top_ref.get_relation(0).attributes
            stats['h_iv'] = attrs.get_attribute(ATTRIBUTE_IND_H)
            stats['h_dv'] = attrs.get_attribute(ATTRIBUTE_DEP_H)
        return stats

    @staticmethod
    def get_fit_statistics(manager: VBMManager, model: Model) -> Dict[str, Dict[str, float]]:
        """
        Statistics of model against the top and then the bottom reference.

        The model's attributes are cleared before each pass and again at
        the end, and the active reference is restored, so later calls are
        computed against the active reference.
        """
        saved = manager.ref_model
        results = {}
        try:
            for ref in ('top', 'bottom'):
                model.attributes.reset()
                manager.set_ref_model(ref)
                manager.compute_information_statistics(model)
                manager.compute_dependent_statistics(model)
                manager.compute_l2_statistics(model)
                manager.compute_pearson_statistics(model)
                results[ref] = dict(model.attributes.items())
        finally:
            VBMManagerImplementation.select_reference(manager, saved)
            model.attributes.reset()
        return results


# Add implementation methods to VBMManager class
def _manager_initialize(self):
    """Initialize references"""
    VBMManagerImplementation.initialize(self)


def _manager_get_relation(self, indices, make_project=True):
    """Get cached relation"""
    return VBMManagerImplementation.get_relation(self, indices, make_project)


def _manager_make_relation(self, name, make_project=True):
    """Get relation by name"""
    return VBMManagerImplementation.make_relation(self, name, make_project)


def _manager_get_child_relation(self, relation, skip, make_project=True):
    """Get child relation"""
    return VBMManagerImplementation.get_child_relation(self, relation, skip, make_project)


def _manager_make_all_child_relations(self, relation, make_project=True):
    """Get all child relations"""
    return VBMManagerImplementation.make_all_child_relations(self, relation, make_project)


def _manager_make_child_model(self, model, remove, make_project=True):
    """Decompose a model relation"""
    return VBMManagerImplementation.make_child_model(self, model, remove, make_project)


def _manager_make_model(self, name, make_project=True):
    """Get model by name"""
    return VBMManagerImplementation.make_model(self, name, make_project)


def _manager_make_reference_models(self, top):
    """Build reference models"""
    VBMManagerImplementation.make_reference_models(self, top)


def _manager_set_ref_model(self, name):
    """Select reference model"""
    return VBMManagerImplementation.set_ref_model(self, name)


def _manager_get_ref_model(self):
    """Active reference model"""
    return self.ref_model


def _manager_get_ind_relation(self):
    """IV relation"""
    return VBMManagerImplementation.get_ind_relation(self)


def _manager_compute_statistics(self, relation):
    """Relation statistics"""
    VBMManagerImplementation.compute_statistics(self, relation)


def _manager_compute_df(self, model):
    """Model DF"""
    return VBMManagerImplementation.compute_df(self, model)


def _manager_compute_h(self, model):
    """Model H"""
    return VBMManagerImplementation.compute_h(self, model)


def _manager_compute_transmission(self, model):
    """Model T"""
    return VBMManagerImplementation.compute_transmission(self, model)


def _manager_compute_explained_information(self, model):
    """Explained information"""
    return VBMManagerImplementation.compute_explained_information(self, model)


def _manager_compute_unexplained_information(self, model):
    """Unexplained information"""
    return VBMManagerImplementation.compute_unexplained_information(self, model)


def _manager_compute_ddf(self, model):
    """Delta DF"""
    return VBMManagerImplementation.compute_ddf(self, model)


def _manager_compute_df_statistics(self, model):
    """DF statistics"""
    VBMManagerImplementation.compute_df_statistics(self, model)


def _manager_compute_information_statistics(self, model):
    """Information statistics"""
    VBMManagerImplementation.compute_information_statistics(self, model)


def _manager_compute_rel_width(self, model):
    """Relation widths"""
    VBMManagerImplementation.compute_rel_width(self, model)


def _manager_compute_l2_statistics(self, model):
    """L2 statistics"""
    VBMManagerImplementation.compute_l2_statistics(self, model)


def _manager_compute_pearson_statistics(self, model):
    """Pearson statistics"""
    VBMManagerImplementation.compute_pearson_statistics(self, model)


def _manager_compute_dependent_statistics(self, model):
    """Dependent statistics"""
    VBMManagerImplementation.compute_dependent_statistics(self, model)


def _manager_compute_bpt(self, model):
    """BP transmission"""
    return VBMManagerImplementation.compute_bpt(self, model)


def _manager_compute_bp_statistics(self, model):
    """BP statistics"""
    VBMManagerImplementation.compute_bp_statistics(self, model)


def _manager_compute_percent_correct(self, model):
    """Percent correct"""
    return VBMManagerImplementation.compute_percent_correct(self, model)


def _manager_set_filter(self, attr, value, op):
    """Set filter"""
    VBMManagerImplementation.set_filter(self, attr, value, op)


def _manager_apply_filter(self, model):
    """Apply filter"""
    return VBMManagerImplementation.apply_filter(self, model)


def _manager_set_sort_attr(self, name, direction=SortDirection.DESCENDING):
    """Set sort attribute"""
    VBMManagerImplementation.set_sort_attr(self, name, direction)


def _manager_get_basic_statistics(self):
    """Basic statistics"""
    return VBMManagerImplementation.get_basic_statistics(self)


def _manager_get_fit_statistics(self, model):
    """Fit statistics against both references"""
    return VBMManagerImplementation.get_fit_statistics(self, model)


@classmethod
def _manager_from_dataframe(cls, data, varlist, options=None, freq_column=None):
    """Create from DataFrame"""
    return VBMManagerImplementation.from_dataframe(data, varlist, options, freq_column)


@classmethod
def _manager_from_files(cls, data_file, yaml_file, freq_column=None):
    """Create from files"""
    return VBMManagerImplementation.from_files(data_file, yaml_file, freq_column)


VBMManager.initialize = _manager_initialize
VBMManager.get_relation = _manager_get_relation
VBMManager.make_relation = _manager_make_relation
VBMManager.get_child_relation = _manager_get_child_relation
VBMManager.make_all_child_relations = _manager_make_all_child_relations
VBMManager.make_child_model = _manager_make_child_model
VBMManager.make_model = _manager_make_model
VBMManager.make_reference_models = _manager_make_reference_models
VBMManager.set_ref_model = _manager_set_ref_model
VBMManager.get_ref_model = _manager_get_ref_model
VBMManager.get_ind_relation = _manager_get_ind_relation
VBMManager.compute_statistics = _manager_compute_statistics
VBMManager.compute_df = _manager_compute_df
VBMManager.compute_h = _manager_compute_h
VBMManager.compute_transmission = _manager_compute_transmission
VBMManager.compute_explained_information = _manager_compute_explained_information
VBMManager.compute_unexplained_information = _manager_compute_unexplained_information
VBMManager.compute_ddf = _manager_compute_ddf
VBMManager.compute_df_statistics = _manager_compute_df_statistics
VBMManager.compute_information_statistics = _manager_compute_information_statistics
VBMManager.compute_rel_width = _manager_compute_rel_width
VBMManager.compute_l2_statistics = _manager_compute_l2_statistics
VBMManager.compute_pearson_statistics = _manager_compute_pearson_statistics
VBMManager.compute_dependent_statistics = _manager_compute_dependent_statistics
VBMManager.compute_bpt = _manager_compute_bpt
VBMManager.compute_bp_statistics = _manager_compute_bp_statistics
VBMManager.compute_percent_correct = _manager_compute_percent_correct
VBMManager.set_filter = _manager_set_filter
VBMManager.apply_filter = _manager_apply_filter
VBMManager.set_sort_attr = _manager_set_sort_attr
VBMManager.get_basic_statistics = _manager_get_basic_statistics
VBMManager.get_fit_statistics = _manager_get_fit_statistics
VBMManager.from_dataframe = _manager_from_dataframe
VBMManager.from_files = _manager_from_files
