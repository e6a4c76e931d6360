"""Business logic: execution states and history tree reconstruction."""

import copy

from galaxy_history.domain.models import HistoryTables, HistoryTree, StateBucket, StateCounts
from galaxy_history.domain.types import JSONObject, Record
from galaxy_history.errors import (
    ArchiveFormatError,
    OutOfOrderElementError,
    UnrecognizedCollectionTypeError,
)

DEFAULT_STATE = StateBucket.OK.value
FLAT_COLLECTION_TYPES = ("list", "paired")
NESTED_COLLECTION_TYPE = "list:paired"


class StateResolutionService:
    """Derives execution states for datasets (from jobs) and collections (from datasets)."""

    @staticmethod
    def effective_dataset_id(dataset: Record) -> object:
        """Return the id of the dataset that was actually produced by a job.

        Copied datasets have no job of their own; the last entry of their copy
        chain refers to the original dataset.
        """
        chain = dataset.get("copied_from_history_dataset_association_id_chain")
        if isinstance(chain, list) and chain:
            return chain[-1]
        return dataset.get("encoded_id")

    @staticmethod
    def find_job(jobs: list[Record], dataset_id: object) -> Record | None:
        """Return the first job whose outputs include the dataset.

        Raises:
            ArchiveFormatError: If a job's ``output_dataset_mapping`` is not a
                mapping of lists
        """
        for job in jobs:
            mapping = job.get("output_dataset_mapping")
            if mapping is None:
                continue
            if not isinstance(mapping, dict):
                raise ArchiveFormatError(
                    "Unexpected value for 'output_dataset_mapping'. "
                    f"Expected a map but got: {type(mapping).__name__}",
                    member="jobs_attrs.txt",
                    field="output_dataset_mapping",
                )
            for outputs in mapping.values():
                if not isinstance(outputs, list):
                    raise ArchiveFormatError(
                        "Unexpected value for 'output_dataset_mapping' field. "
                        f"Expected a list but got: {type(outputs).__name__}",
                        member="jobs_attrs.txt",
                        field="output_dataset_mapping",
                    )
                if dataset_id in outputs:
                    return job
        return None

    @classmethod
    def resolve_dataset_states(cls, datasets: list[Record], jobs: list[Record]) -> None:
        """Set ``state`` (and ``job`` when known) on every dataset in place.

        Datasets without an owning job, or whose job has no state, are "ok".
        """
        for dataset in datasets:
            job = cls.find_job(jobs, cls.effective_dataset_id(dataset))
            if job is None:
                dataset["state"] = DEFAULT_STATE
                continue
            dataset["job"] = job.get("encoded_id")
            state = job.get("state")
            dataset["state"] = state if state is not None else DEFAULT_STATE

    @classmethod
    def count_states(cls, contents: JSONObject, dataset_states: dict) -> StateCounts:
        """Count dataset states in a collection, recursing into child collections.

        Side effect: every nested collection element gets its own ``state``.

        Args:
            contents: The collection object holding ``elements``
            dataset_states: Mapping from dataset encoded id to resolved state
        """
        elements = contents.get("elements")
        if not isinstance(elements, list):
            raise ArchiveFormatError(
                f"No 'elements' entry in collection object [{contents.get('encoded_id')}]",
                member="collections_attrs.txt",
                field="elements",
            )

        counts = StateCounts()
        for element in elements:
            element_type = element.get("element_type")
            if element_type == "hda":
                hda = element.get("hda")
                dataset_id = hda.get("encoded_id") if isinstance(hda, dict) else None
                counts.add(StateBucket.for_state(dataset_states.get(dataset_id)))
            elif element_type == "dataset_collection":
                child = element.get("child_collection")
                if not isinstance(child, dict):
                    raise ArchiveFormatError(
                        "Child collection not found",
                        member="collections_attrs.txt",
                        field="child_collection",
                    )
                child_counts = cls.count_states(child, dataset_states)
                element["state"] = child_counts.state
                counts.merge(child_counts)
            else:
                raise ArchiveFormatError(
                    f"Unexpected element type while processing collection states: {element_type}",
                    member="collections_attrs.txt",
                    field="element_type",
                )
        return counts

    @classmethod
    def resolve_collection_states(
        cls, collections: list[Record], datasets: list[Record]
    ) -> None:
        """Set the aggregate ``state`` on every collection in place."""
        dataset_states = {dataset.get("encoded_id"): dataset.get("state") for dataset in datasets}
        for collection in collections:
            collection["state"] = cls.count_states(
                _collection_contents(collection), dataset_states
            ).state

    @classmethod
    def resolve(cls, tables: HistoryTables) -> None:
        """Run the state enrichment pass over freshly loaded tables."""
        cls.resolve_dataset_states(tables.datasets, tables.jobs)
        cls.resolve_collection_states(tables.collections, tables.datasets)


class HistoryTreeService:
    """Synthesizes the user facing history tree from the enriched tables.

    The input tables are never modified; all restructuring happens on deep
    copies so the same tables can be turned into a tree repeatedly.
    """

    @staticmethod
    def prepare_dataset(dataset: Record) -> None:
        """Normalize a dataset record for presentation."""
        dataset["class"] = "dataset"
        dataset["size"] = dataset.pop("blurb", None)
        metadata = dataset.pop("metadata", None)
        dataset["dbkey"] = metadata.get("dbkey") if isinstance(metadata, dict) else None

    @classmethod
    def process_collection(
        cls,
        contents: JSONObject,
        datasets_by_id: dict,
        absorbed: set,
    ) -> None:
        """Inline datasets and child collections into a collection's elements.

        Args:
            contents: The collection object (``type`` and ``elements``)
            datasets_by_id: Prepared datasets keyed by encoded id
            absorbed: Collects ids of datasets placed inside collections
        """
        elements = contents.get("elements")
        if not isinstance(elements, list):
            raise ArchiveFormatError(
                f"No 'elements' entry in collection object [{contents.get('encoded_id')}]",
                field="elements",
            )
        contents["collection_size"] = len(elements)
        collection_type = contents.get("type")

        for index, element in enumerate(elements):
            if element.get("element_index") != index:
                raise OutOfOrderElementError(index, element.get("element_index"))
            element["name"] = element.pop("element_identifier", None)

            if collection_type in FLAT_COLLECTION_TYPES:
                hda = element.get("hda")
                dataset_id = hda.get("encoded_id") if isinstance(hda, dict) else None
                dataset = datasets_by_id.get(dataset_id)
                if dataset is None:
                    raise ArchiveFormatError(
                        f"Dataset [{dataset_id}] not found in datasets list",
                        field="hda",
                        element_index=index,
                    )
                # The same dataset can be referenced from several collections
                dataset = copy.deepcopy(dataset)
                dataset["element_encoded_id"] = element.get("encoded_id")
                element["dataset"] = dataset
                absorbed.add(dataset_id)
            elif collection_type == NESTED_COLLECTION_TYPE:
                child = element.pop("child_collection", None)
                if child is None:
                    raise ArchiveFormatError(
                        "Child collection not found", field="child_collection", element_index=index
                    )
                element["class"] = child.get("type")
                cls.process_collection(child, datasets_by_id, absorbed)
                element["collection"] = child
            else:
                raise UnrecognizedCollectionTypeError(collection_type)

    @classmethod
    def build(cls, tables: HistoryTables, history_size: str | None = None) -> HistoryTree:
        """Build the history tree, newest item (highest hid) first.

        Args:
            tables: Tables already enriched by StateResolutionService
            history_size: Optional readable size added to the metadata

        Raises:
            ArchiveFormatError: On any inconsistency between the tables
        """
        datasets = copy.deepcopy(tables.datasets)
        collections = copy.deepcopy(tables.collections)

        for dataset in datasets:
            cls.prepare_dataset(dataset)
        datasets_by_id = {dataset.get("encoded_id"): dataset for dataset in datasets}

        contents: list[Record] = []
        absorbed: set = set()
        for collection in collections:
            collection["name"] = collection.pop("display_name", None)
            nested = _collection_contents(collection)
            collection["class"] = nested.get("type")
            cls.process_collection(nested, datasets_by_id, absorbed)
            contents.append(collection)

        for dataset in datasets:
            if dataset.get("visible") and dataset.get("encoded_id") not in absorbed:
                contents.append(dataset)

        contents.sort(key=_hid, reverse=True)

        metadata = copy.deepcopy(tables.history)
        if history_size is not None:
            metadata["history_size"] = history_size
        return HistoryTree(metadata=metadata, contents=contents)


def _collection_contents(collection: Record) -> JSONObject:
    contents = collection.get("collection")
    if not isinstance(contents, dict):
        raise ArchiveFormatError(
            f"Collection [{collection.get('encoded_id')}] has no 'collection' object",
            member="collections_attrs.txt",
            field="collection",
        )
    return contents


def _hid(item: Record) -> int:
    hid = item.get("hid")
    if not isinstance(hid, int) or isinstance(hid, bool):
        raise ArchiveFormatError(
            f"Missing or non-integer 'hid' for [{item.get('encoded_id')}]", field="hid"
        )
    return hid
