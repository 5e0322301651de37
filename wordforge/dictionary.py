from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Optional, Set, Union

from .trie import Trie

logger = logging.getLogger(__name__)

# Built-in word list for development/demo.
# In production, point WORDLIST_PATH at a full word list (one word per line).

DEFAULT_WORDS = {
    'ace','act','add','age','aid','aim','air','ale','all','and','ant','ape','arc','are','arm','art','ash','ask','ate',
    'bad','bag','ban','bar','bat','bay','bed','bee','bet','bid','big','bin','bit','boa','bog','bow','box','boy','bud','bug','bun','bus','but','buy',
    'cab','can','cap','car','cat','cob','cod','cog','cot','cow','cry','cub','cup','cut',
    'dab','dam','day','den','dew','did','dig','dim','dip','doe','dog','dot','dry','due','dug','dye',
    'ear','eat','egg','elf','elk','elm','end','era','eve','ewe','eye',
    'fan','far','fat','fax','fed','fee','few','fig','fin','fir','fit','fix','fly','foe','fog','for','fox','fry','fun','fur',
    'gap','gas','gel','gem','get','gin','got','gum','gun','gut','guy',
    'had','ham','has','hat','hay','hen','her','hid','him','hip','his','hit','hog','hop','hot','how','hub','hue','hug','hut',
    'ice','icy','ill','ink','inn','ion','ire','irk','its','ivy',
    'jab','jam','jar','jaw','jay','jet','jig','job','jog','jot','joy','jug',
    'keg','key','kid','kin','kit',
    'lab','lad','lap','law','lay','led','leg','let','lid','lie','lip','lit','log','lot','low',
    'mad','man','map','mat','may','men','met','mix','mob','mop','mud','mug',
    'nap','net','new','nil','nod','nor','not','now','nun','nut',
    'oak','oar','oat','odd','off','oil','old','one','orb','ore','our','out','owl','own',
    'pad','pal','pan','paw','pay','pea','pen','pet','pie','pig','pin','pit','pod','pop','pot','pro','pub','pun','pup','put',
    'rag','ram','ran','rat','raw','ray','red','rib','rid','rim','rip','rob','rod','rot','row','rub','rug','run','rut','rye',
    'sad','sap','sat','saw','say','sea','see','set','sew','she','shy','sin','sip','sir','sit','six','ski','sky','sly','sob','son','sow','soy','spa','spy','sun',
    'tab','tag','tan','tap','tar','tea','ten','the','tie','tin','tip','toe','ton','too','top','toy','try','tub','tug','two',
    'urn','use','van','vat','vet','via','vow',
    'wag','war','was','wax','way','web','wed','wet','who','why','wig','win','wit','woe','won','wow',
    'yak','yam','yap','yes','yet','yew','you','zap','zip','zoo',
    'able','also','arch','area','army','away','baby','back','ball','band','bank','bark','barn','base','bath','bead','beak','beam','bean','bear','beat','bell','belt','bird','bite','blue','boat','body','bold','bone','book','boot','bowl','bulb','bull','burn','bush','cake','calm','came','camp','card','care','cart','cash','cast','cats','cave','chat','chin','city','clam','clay','clip','club','coal','coat','code','coin','cold','cone','cook','cool','cord','corn','cost','crab','crew','crop','crow','cube','cure','dare','dark','dart','dash','date','dawn','deal','dear','deep','deer','desk','dial','dice','dine','dirt','dish','dive','dock','dogs','doll','door','dose','dove','down','drag','draw','drip','drop','drum','duck','dune','dusk','dust','duty','each','earn','ears','east','easy','echo','edge','even','ever','face','fact','fair','fall','farm','fast','fear','feed','feel','fern','file','fill','film','find','fine','fire','fish','fist','five','flag','flat','flip','flow','foam','fold','folk','food','foot','fork','form','fort','four','frog','fuel','full','game','gate','gave','gear','gift','girl','give','glad','glow','glue','goal','goat','gold','golf','gone','good','grab','gray','grin','grip','grow','gulf','hair','half','hall','hand','hang','hard','harm','hate','have','hawk','head','heal','heap','hear','heat','herb','herd','here','hero','hide','high','hike','hill','hint','hold','hole','home','hood','hook','hope','horn','hose','host','hour','huge','hunt','hurt','idea','inch','iron','isle','item','jail','joke','jump','jury','just','keen','keep','kick','kind','king','kiss','kite','knee','knot','know','lace','lake','lamb','lamp','land','lane','last','late','lead','leaf','lean','left','lend','less','life','lift','like','lime','line','link','lion','list','live','load','loaf','lock','long','look','loop','lord','lose','loud','love','luck','lung','made','mail','main','make','malt','many','mark','mask','mast','meal','meat','meet','melt','mild','milk','mind','mine','mint','miss','mist','moat','mode','mole','moon','more','moss','most','moth','move','much','mule','must','nail','name','near','neck','need','nest','news','next','nice','nine','node','none','nose','note','oath','once','only','open','oven','over','pace','pack','page','paid','pail','pain','pair','palm','park','part','pass','past','path','peak','pear','pest','pick','pile','pine','pink','pipe','plan','play','plot','plum','poem','poet','pole','pond','pony','pool','poor','pork','port','pose','post','pour','pull','pump','pure','push','quiz','race','rain','rake','rank','rare','rate','read','real','rest','rice','rich','ride','ring','rise','risk','road','roar','rock','role','roll','roof','room','root','rope','rose','ruby','rule','rush','rust','safe','sail','salt','same','sand','save','seal','seat','seed','seek','self','sell','send','ship','shoe','shop','shot','show','shut','sick','side','sign','silk','sing','sink','size','skin','slow','snow','soap','sock','soft','soil','sold','sole','some','song','soon','sort','soup','spin','spot','star','stay','stem','step','stir','stop','such','suit','sure','swim','tail','take','tale','talk','tall','tame','tank','tape','task','team','tear','tell','tent','term','test','than','that','them','then','they','thin','this','tide','tile','time','tiny','toad','told','toll','tone','tool','tour','town','tree','trip','true','tube','tune','turn','twin','type','unit','upon','used','vase','vast','verb','very','vest','view','vine','vote','wade','wage','wait','wake','walk','wall','want','warm','wash','wave','weak','wear','week','well','west','what','when','whip','wide','wife','wild','will','wind','wine','wing','wink','wire','wise','wish','with','wolf','wood','wool','word','wore','work','worm','wrap','yard','yarn','year','yell','zero','zone',
    'actor','adult','after','again','agent','alarm','album','alert','alive','allow','alone','amber','angel','anger','angle','apple','apron','arena','arrow','aside','audio','award','bacon','badge','baker','basic','basin','beach','beard','beast','begin','bench','berry','birds','black','blade','blank','blast','blaze','blend','blind','block','bloom','board','boast','bonus','boost','booth','brain','brand','brave','bread','break','brick','bride','brief','bring','broad','brush','build','bunch','cabin','cable','camel','candy','canoe','cargo','carry','catch','cause','chain','chair','chalk','charm','chart','chase','cheap','check','cheek','cheer','chess','chest','chief','child','chord','civic','claim','class','clean','clear','clerk','click','cliff','climb','clock','close','cloth','cloud','clown','coach','coast','coral','couch','count','court','cover','crane','crash','cream','crest','crisp','cross','crowd','crown','crust','curve','cycle','daily','dairy','dance','delay','depth','diary','dough','draft','drain','drama','dream','dress','drift','drink','drive','eagle','early','earth','eight','elbow','elder','empty','enemy','enjoy','entry','equal','event','exact','extra','fable','faith','false','fancy','feast','fence','fever','field','fifty','final','flame','flash','fleet','float','flock','flood','floor','flour','fluid','flute','focus','force','forge','forty','frame','fresh','front','frost','fruit','gauge','ghost','giant','glass','globe','glove','grace','grade','grain','grand','grape','graph','grass','great','green','greet','grill','group','guard','guess','guest','guide','habit','happy','heart','heavy','hedge','honey','horse','hotel','house','human','humor','ideal','image','index','input','ivory','jelly','jewel','joint','judge','juice','knife','knock','label','labor','large','laser','later','laugh','layer','learn','lemon','level','light','limit','linen','liver','local','lodge','logic','lucky','lunar','lunch','magic','major','maple','march','match','mayor','medal','metal','meter','minor','model','money','month','moral','motor','mount','mouse','mouth','movie','music','nerve','never','night','noble','noise','north','novel','nurse','ocean','offer','olive','onion','opera','orbit','order','other','otter','owner','paint','panel','paper','party','pasta','patch','peace','peach','pearl','pedal','penny','phone','photo','piano','piece','pilot','pitch','pizza','place','plain','plane','plant','plate','plaza','point','polar','porch','pound','power','press','price','pride','prime','print','prize','proof','proud','pulse','punch','pupil','puppy','queen','quest','quick','quiet','quilt','quota','radar','radio','raise','rally','ranch','range','rapid','raven','reach','ready','realm','relax','reply','rider','ridge','rifle','right','river','roast','robin','robot','rocky','round','route','royal','rumor','rural','salad','sauce','scale','scarf','scene','scent','scope','score','scout','screw','seven','shade','shake','shape','share','shark','sharp','sheep','sheet','shelf','shell','shift','shine','shirt','shock','shore','short','shout','sight','silly','skill','skirt','slate','sleep','slice','slide','slope','small','smart','smile','smoke','snack','snake','solar','solid','sound','south','space','spare','spark','speak','speed','spell','spend','spice','spine','spoon','sport','squad','staff','stage','stair','stamp','stand','start','state','steam','steel','stick','still','stock','stone','stool','storm','story','stove','straw','strip','study','style','sugar','suite','sunny','super','swamp','sweet','swift','table','taste','teach','thank','theme','thick','thing','think','three','throw','thumb','tiger','title','toast','today','token','tooth','topic','torch','total','touch','tough','towel','tower','toxic','trace','track','trade','trail','train','treat','trend','trial','tribe','trick','truck','trunk','trust','truth','tulip','twist','uncle','under','union','unity','upper','urban','usual','valid','value','valve','video','visit','vital','vivid','vocal','voice','wagon','watch','water','whale','wheat','wheel','while','white','whole','woman','world','worry','write','yacht','yield','young','youth','zebra',
}


def load_words(path: Union[str, Path], min_length: int = 3, max_length: int = 5) -> Set[str]:
    """Read a word list (one word per line) keeping lowercase ASCII words within the length bounds."""
    words: Set[str] = set()
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        for line in f:
            w = line.strip().lower()
            if not (min_length <= len(w) <= max_length):
                continue
            if not (w.isascii() and w.isalpha()):
                continue
            words.add(w)
    logger.info("Loaded %s words from %s", len(words), path)
    return words


class DictionaryService:
    def __init__(self, words: Optional[Iterable[str]] = None):
        self.trie = Trie.from_words(words if words is not None else DEFAULT_WORDS)

    @classmethod
    def from_path(cls, path: Optional[Union[str, Path]], min_length: int = 3, max_length: int = 5) -> 'DictionaryService':
        if not path:
            logger.warning("No word list configured, using %s built-in words", len(DEFAULT_WORDS))
            return cls()
        if not Path(path).exists():
            logger.warning("Word list %s not found, using %s built-in words", path, len(DEFAULT_WORDS))
            return cls()
        return cls(load_words(path, min_length, max_length))

    def is_valid(self, word: str) -> bool:
        if not word:
            return False
        return self.trie.exists(word)

    def is_prefix(self, text: str) -> bool:
        return self.trie.is_prefix(text)

    def exists(self, word: str) -> bool:
        return self.is_valid(word)

    def __len__(self) -> int:
        return len(self.trie)
