# llpages

Thread-safe bookkeeping for dividing a large region into fixed-size pages.
The package keeps track of which pages are taken, which are free, and how
many pages each allocation spans. Every shared structure guards its state
with a lock, so several threads can use it at once.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `llpages.bitmask`

- `AtomicBitMask(mask=0)` holds 64 slots. A set bit means the slot is
  claimed and a clear bit means it is free.
  - `initialize(mask)` overwrites the whole mask. `load()` returns the
    current mask.
  - `claim_single()` claims the lowest free bit and returns its index. It
    returns `None` when every bit is claimed.
  - `claim_multiple(number, align=1)` searches from the highest bits down
    for `number` consecutive free bits whose start is a multiple of
    `align`, and returns `(index, count)`. If no run of that length fits,
    it claims as many aligned low bits as it can and returns `(0, count)`,
    so that the claim can be continued in the mask below. If it claims
    nothing, it returns `None`.
  - `claim_at(inner, number)` claims exactly the bits
    `inner..inner+number` and returns whether it succeeded. A failed claim
    leaves the mask as it was.
  - `release_single(inner)` and `release_multiple(inner, number)` release
    claimed bits. Releasing a bit that is not claimed raises `ValueError`.
- `low_mask(number)` and `high_mask(number)` return 64-bit masks with the
  lowest or the highest `number` bits set.

### `llpages.ledger`

- `ClaimLedger(workers)` records, for each worker, the last mask it claimed
  and the last mask it released. It is used to check the result of
  concurrent work on a mask.
  - `reset(worker)` clears both records for that worker.
  - `record_claim(worker, mask)` and `record_release(worker, mask)` store a
    mask.
  - `claimed_mask()` and `released_mask()` return the combined masks.
  - `claimed_exact()` and `released_exact()` return the non-empty masks,
    sorted.
  - `claimed_ranges()` returns each worker's claim as a `range` of bit
    indexes.
- `mask_to_range(mask)` converts a contiguous mask to a `range`. A mask with
  gaps raises `ValueError`.
- `range_to_mask(start, stop)` converts a `range` back to a mask.

### `llpages.pages`

- `PageIndex(value)` is a frozen, ordered page index. It must be positive.
- `PageSizes()` stores the number of pages in the allocation that starts at
  each of 512 indexes, for sizes from 1 to 511.
  - `get(index)` returns the stored size. A slot that was never set reads as
    1.
  - `set(index, number_pages)` stores a size.
  - `unset(index, number_pages)` clears a size.

### `llpages.adrift`

- `Adrift()` is a generation counter. An even value means the page is
  anchored and an odd value means it is adrift.
  - `cast_adrift()` increments the counter and returns the new generation.
    It raises `RuntimeError` if the page is already adrift.
  - `is_adrift()` returns the current generation while the page is adrift,
    and `None` otherwise.
  - `catch(current)` anchors the page only if it is still at generation
    `current`, and returns whether that happened.
  - `value()` returns the raw counter.

### `llpages.page_tokens`

- `PageTokens(number_pages)` maps 512 pages onto eight `AtomicBitMask`
  words. Page 0 is always occupied. Pages past `number_pages` start out
  occupied.
  - `PageTokens.from_masks(masks)` builds tokens from exactly eight masks.
  - `load()` returns the eight masks, lowest pages first.
  - `fast_allocate()` takes the lowest free page.
  - `flexible_allocate(number_pages, align_pages=1)` takes a run of
    consecutive pages, searching from the highest pages down. The run may
    cross word boundaries. The start of the run is a multiple of
    `align_pages`.
  - `fast_deallocate(index)` frees one page.
  - `flexible_deallocate(index, number_pages)` frees a run of pages.

### `llpages.huge_foreign`

- `HugePageForeign(number_pages)` combines `PageTokens` and `PageSizes`.
  - `allocate(number_pages, align_pages=1)` returns the first `PageIndex` of
    the run, or `None` when nothing fits.
  - `deallocate(index)` looks up the recorded size and frees the whole run.
  - `number_pages` gives the number of pages available for allocation.

## Example

```python
from llpages.bitmask import AtomicBitMask
from llpages.huge_foreign import HugePageForeign

mask = AtomicBitMask(0)
mask.claim_single()               # 0
mask.claim_multiple(4, 1)         # (60, 4): highest bits first

foreign = HugePageForeign(511)
first = foreign.allocate(1)       # PageIndex(value=1)
block = foreign.allocate(26)      # PageIndex(value=486)
foreign.deallocate(block)         # frees all 26 pages
```

## What it does not do

The package records only which pages and bits are in use. It does not
reserve, map or hand out memory itself. It also does not provide the layers
that would turn these pieces into a working allocator, such as per-thread
caches, free lists of blocks within a page, or an allocation API.