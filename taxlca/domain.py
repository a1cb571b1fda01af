from typing import List, NamedTuple


class Job(NamedTuple):
    rank: int
    start: int
    size: int

    @property
    def stop(self):
        return self.start + self.size


def decompose_domain(domain_size: int, world_rank: int,
                     world_size: int) -> Job:
    """Contiguous slice of ``range(domain_size)`` owned by ``world_rank``.

    With more workers than records the first ``domain_size`` ranks take
    one record each and the rest get an empty job at the end of the range.
    """
    if world_size > domain_size:
        if world_rank < domain_size:
            return Job(world_rank, world_rank, 1)
        return Job(world_rank, domain_size, 0)

    subdomain_size = domain_size // world_size
    subdomain_start = subdomain_size * world_rank
    if world_rank == world_size - 1:
        subdomain_size += domain_size % world_size
    return Job(world_rank, subdomain_start, subdomain_size)


def decompose(total_size: int, worker_count: int) -> List[Job]:
    if worker_count < 1:
        raise ValueError(f"worker_count must be at least 1, got "
                         f"{worker_count}")
    if total_size < 0:
        raise ValueError(f"total_size must not be negative, got "
                         f"{total_size}")
    return [decompose_domain(total_size, rank, worker_count)
            for rank in range(worker_count)]
